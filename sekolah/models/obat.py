from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Index, Integer, String

from sekolah.core.constants import DEFAULT_BATAS_MINIMAL
from sekolah.database.base import Base


class Obat(Base):
    __tablename__ = "obat"

    id = Column(Integer, primary_key=True)
    nama_obat = Column(String, nullable=False)
    jumlah = Column(Integer, nullable=False, default=0)
    lokasi = Column(String(10), nullable=False)
    satuan = Column(String)
    tanggal_kadaluarsa = Column(Date)
    batas_minimal = Column(Integer, nullable=False, default=DEFAULT_BATAS_MINIMAL)
    keterangan = Column(String)

    tanggal_input = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    created_by_user_id = Column(Integer, ForeignKey("users.id"))
    deleted_at = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("jumlah >= 0", name="ck_obat_jumlah_non_negative"),
        Index("idx_obat_lokasi", "lokasi"),
        Index("idx_obat_kadaluarsa", "tanggal_kadaluarsa"),
    )


__all__ = ["Obat"]
