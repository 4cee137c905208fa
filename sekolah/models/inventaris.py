from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String

from sekolah.database.base import Base


class Inventaris(Base):
    __tablename__ = "inventaris"

    id = Column(Integer, primary_key=True)
    nama_barang = Column(String, nullable=False)
    kategori = Column(String, nullable=False)
    jumlah = Column(Integer, nullable=False, default=0)
    lokasi = Column(String(10), nullable=False)
    kondisi = Column(String, nullable=False)
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
        Index("idx_inventaris_lokasi_kategori", "lokasi", "kategori"),
    )


__all__ = ["Inventaris"]
