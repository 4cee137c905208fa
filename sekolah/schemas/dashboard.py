from pydantic import BaseModel

from sekolah.schemas.inventaris import InventarisRead
from sekolah.schemas.obat import ObatRead


class DashboardStats(BaseModel):
    total_peralatan: int
    total_perabot: int
    total_elektronik: int
    total_buku: int
    total_obat: int
    kategori_totals: dict[str, int]
    low_stock_medicines: list[ObatRead]
    damaged_items: list[InventarisRead]
