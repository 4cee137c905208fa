from sqlalchemy import Boolean, Column, Integer, String

from sekolah.database.base import Base


class MasterSatuan(Base):
    __tablename__ = "master_satuan"

    id = Column(Integer, primary_key=True)
    nama = Column(String(40), nullable=False, unique=True)
    is_active = Column(Boolean, nullable=False, default=True)


__all__ = ["MasterSatuan"]
