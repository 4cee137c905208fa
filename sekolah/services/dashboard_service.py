from datetime import date, timedelta
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from sekolah.config import get_settings
from sekolah.core.access import location_values
from sekolah.core.constants import Kategori, Kondisi, Lokasi
from sekolah.models.inventaris import Inventaris
from sekolah.models.obat import Obat
from sekolah.services.obat_service import sweep_before_read

# Flat keys kept for clients that read the original response shape.
_CATEGORY_FIELDS = {
    Kategori.PERALATAN: "total_peralatan",
    Kategori.PERABOT: "total_perabot",
    Kategori.ELEKTRONIK: "total_elektronik",
    Kategori.BUKU: "total_buku",
}


def _category_totals(db: Session, values: list[str]) -> dict[str, int]:
    rows = db.execute(
        select(Inventaris.kategori, func.coalesce(func.sum(Inventaris.jumlah), 0))
        .where(Inventaris.lokasi.in_(values), Inventaris.deleted_at.is_(None))
        .group_by(Inventaris.kategori)
    ).all()
    totals = {kategori.value: 0 for kategori in Kategori}
    for kategori, total in rows:
        totals[kategori] = int(total or 0)
    return totals


def dashboard_stats(
    db: Session,
    locations: frozenset[Lokasi],
    *,
    today: Optional[date] = None,
) -> dict:
    settings = get_settings()
    today = today or date.today()
    sweep_before_read(db, locations, today)

    values = location_values(locations)

    kategori_totals = _category_totals(db, values)

    total_obat = db.execute(
        select(func.coalesce(func.sum(Obat.jumlah), 0)).where(
            Obat.lokasi.in_(values), Obat.deleted_at.is_(None)
        )
    ).scalar_one()

    expiring_cutoff = today + timedelta(days=settings.EXPIRING_SOON_DAYS)
    low_stock_medicines = db.execute(
        select(Obat)
        .where(
            Obat.lokasi.in_(values),
            Obat.deleted_at.is_(None),
            or_(
                Obat.jumlah <= Obat.batas_minimal,
                Obat.tanggal_kadaluarsa <= expiring_cutoff,
            ),
        )
        .order_by(Obat.jumlah.asc(), Obat.nama_obat.asc())
    ).scalars().all()

    damaged_items = db.execute(
        select(Inventaris)
        .where(
            Inventaris.lokasi.in_(values),
            Inventaris.deleted_at.is_(None),
            Inventaris.kondisi == Kondisi.RUSAK_BERAT.value,
        )
        .order_by(Inventaris.created_at.desc(), Inventaris.id.desc())
    ).scalars().all()

    stats = {field: kategori_totals[kategori.value] for kategori, field in _CATEGORY_FIELDS.items()}
    stats.update(
        {
            "total_obat": int(total_obat or 0),
            "kategori_totals": kategori_totals,
            "low_stock_medicines": list(low_stock_medicines),
            "damaged_items": list(damaged_items),
        }
    )
    return stats


__all__ = ["dashboard_stats"]
