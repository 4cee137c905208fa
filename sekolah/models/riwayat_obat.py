from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String

from sekolah.database.base import Base


class RiwayatObat(Base):
    """Append-only ledger of medicine stock decrements."""

    __tablename__ = "riwayat_obat"

    id = Column(Integer, primary_key=True)
    obat_id = Column(Integer, ForeignKey("obat.id"), nullable=False)

    jumlah_keluar = Column(Integer, nullable=False)
    tanggal_keluar = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    keterangan = Column(String)

    created_by_user_id = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint("jumlah_keluar > 0", name="ck_riwayat_jumlah_keluar_positive"),
        Index("idx_riwayat_obat_id", "obat_id"),
    )


__all__ = ["RiwayatObat"]
