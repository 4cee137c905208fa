from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from sekolah.core.constants import Kategori, Kondisi, Lokasi
from sekolah.schemas.common import PayloadModel


class InventarisBase(PayloadModel):
    nama_barang: str = Field(min_length=1, max_length=200)
    kategori: Kategori
    jumlah: int = Field(ge=0)
    lokasi: Lokasi
    kondisi: Kondisi
    keterangan: Optional[str] = None


class InventarisCreate(InventarisBase):
    pass


class InventarisUpdate(InventarisBase):
    pass


class InventarisRead(BaseModel):
    id: int
    nama_barang: str
    kategori: str
    jumlah: int
    lokasi: str
    kondisi: str
    keterangan: Optional[str]
    tanggal_input: datetime
    created_by_user_id: Optional[int]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
