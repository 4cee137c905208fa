import logging
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sekolah.core.access import ensure_location_allowed, location_values
from sekolah.core.constants import Lokasi
from sekolah.core.dates import utcnow
from sekolah.core.errors import RecordNotFound
from sekolah.models.inventaris import Inventaris
from sekolah.schemas.inventaris import InventarisCreate, InventarisUpdate

logger = logging.getLogger(__name__)


def _visible(locations: frozenset[Lokasi]):
    return select(Inventaris).where(
        Inventaris.lokasi.in_(location_values(locations)),
        Inventaris.deleted_at.is_(None),
    )


def _commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def list_inventaris(
    db: Session,
    locations: frozenset[Lokasi],
    *,
    lokasi: Optional[str] = None,
    kategori: Optional[str] = None,
    kondisi: Optional[str] = None,
    query: Optional[str] = None,
) -> list[Inventaris]:
    stmt = _visible(locations)
    if lokasi:
        ensure_location_allowed(lokasi, locations)
        stmt = stmt.where(Inventaris.lokasi == Lokasi(lokasi).value)
    if kategori:
        stmt = stmt.where(Inventaris.kategori == kategori)
    if kondisi:
        stmt = stmt.where(Inventaris.kondisi == kondisi)
    if query:
        pattern = f"%{query.strip().lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Inventaris.nama_barang).like(pattern),
                func.lower(Inventaris.keterangan).like(pattern),
            )
        )
    stmt = stmt.order_by(Inventaris.created_at.desc(), Inventaris.id.desc())
    return list(db.execute(stmt).scalars().all())


def get_inventaris(db: Session, item_id: int, locations: frozenset[Lokasi]) -> Inventaris:
    item = db.execute(_visible(locations).where(Inventaris.id == item_id)).scalars().first()
    if item is None:
        raise RecordNotFound("Inventory item not found")
    return item


def create_inventaris(
    db: Session,
    payload: InventarisCreate,
    locations: frozenset[Lokasi],
    *,
    user_id: Optional[int] = None,
) -> Inventaris:
    ensure_location_allowed(payload.lokasi, locations)
    item = Inventaris(
        nama_barang=payload.nama_barang,
        kategori=payload.kategori,
        jumlah=payload.jumlah,
        lokasi=payload.lokasi,
        kondisi=payload.kondisi,
        keterangan=payload.keterangan,
        created_by_user_id=user_id,
    )
    db.add(item)
    _commit(db)
    db.refresh(item)
    return item


def update_inventaris(
    db: Session,
    item_id: int,
    payload: InventarisUpdate,
    locations: frozenset[Lokasi],
) -> Inventaris:
    item = get_inventaris(db, item_id, locations)
    ensure_location_allowed(payload.lokasi, locations)

    item.nama_barang = payload.nama_barang
    item.kategori = payload.kategori
    item.jumlah = payload.jumlah
    item.lokasi = payload.lokasi
    item.kondisi = payload.kondisi
    item.keterangan = payload.keterangan
    _commit(db)
    db.refresh(item)
    return item


def soft_delete_inventaris(db: Session, item_id: int, locations: frozenset[Lokasi]) -> Inventaris:
    item = get_inventaris(db, item_id, locations)
    item.deleted_at = utcnow()
    _commit(db)
    logger.info("Soft-deleted inventory item %s", item_id)
    return item


__all__ = [
    "create_inventaris",
    "get_inventaris",
    "list_inventaris",
    "soft_delete_inventaris",
    "update_inventaris",
]
