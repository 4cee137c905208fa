from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sekolah.core.constants import DEFAULT_BATAS_MINIMAL, Lokasi
from sekolah.schemas.common import PayloadModel, blank_to_none


class ObatBase(PayloadModel):
    nama_obat: str = Field(min_length=1, max_length=200)
    jumlah: int = Field(ge=0)
    lokasi: Lokasi
    satuan: Optional[str] = Field(default=None, max_length=40)
    tanggal_kadaluarsa: Optional[date] = None
    batas_minimal: int = Field(default=DEFAULT_BATAS_MINIMAL, ge=1)
    keterangan: Optional[str] = None

    @field_validator("satuan", mode="before")
    @classmethod
    def _blank_satuan(cls, value):
        return blank_to_none(value)

    @field_validator("tanggal_kadaluarsa", mode="before")
    @classmethod
    def _date_only(cls, value):
        # Browsers may send a full ISO timestamp for date inputs.
        if isinstance(value, str) and "T" in value:
            value = value.split("T", 1)[0]
        return blank_to_none(value)


class ObatCreate(ObatBase):
    pass


class ObatUpdate(ObatBase):
    pass


class ObatRead(BaseModel):
    id: int
    nama_obat: str
    jumlah: int
    lokasi: str
    satuan: Optional[str]
    tanggal_kadaluarsa: Optional[date]
    batas_minimal: int
    keterangan: Optional[str]
    tanggal_input: datetime
    created_by_user_id: Optional[int]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ObatUsageRequest(PayloadModel):
    obat_id: int
    jumlah_keluar: int = Field(gt=0)
    keterangan: Optional[str] = None


class RiwayatObatRead(BaseModel):
    id: int
    obat_id: int
    jumlah_keluar: int
    tanggal_keluar: datetime
    keterangan: Optional[str]
    created_by_user_id: Optional[int]
    created_at: datetime
    nama_obat: str
    lokasi: str

    model_config = ConfigDict(from_attributes=True)


class SweepResult(BaseModel):
    expired_count: int
    locations: list[str]
    swept_on: date


class SatuanCreate(BaseModel):
    nama: str = Field(min_length=1, max_length=40)

    model_config = ConfigDict(str_strip_whitespace=True)
