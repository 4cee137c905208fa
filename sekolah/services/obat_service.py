import logging
from datetime import date
from typing import Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sekolah.config import get_settings
from sekolah.core.access import ensure_location_allowed, location_values
from sekolah.core.constants import EXPIRED_USAGE_NOTE, MANUAL_USAGE_NOTE, Lokasi
from sekolah.core.dates import format_id_date, utcnow
from sekolah.core.errors import RecordNotFound, ValidationFailed
from sekolah.models.obat import Obat
from sekolah.models.riwayat_obat import RiwayatObat
from sekolah.schemas.obat import ObatCreate, ObatUpdate

logger = logging.getLogger(__name__)


def _visible(locations: frozenset[Lokasi]):
    return select(Obat).where(
        Obat.lokasi.in_(location_values(locations)),
        Obat.deleted_at.is_(None),
    )


def list_obat(
    db: Session,
    locations: frozenset[Lokasi],
    *,
    lokasi: Optional[str] = None,
    query: Optional[str] = None,
    low_stock: bool = False,
) -> list[Obat]:
    stmt = _visible(locations)
    if lokasi:
        ensure_location_allowed(lokasi, locations)
        stmt = stmt.where(Obat.lokasi == Lokasi(lokasi).value)
    if query:
        pattern = f"%{query.strip().lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Obat.nama_obat).like(pattern),
                func.lower(Obat.keterangan).like(pattern),
            )
        )
    if low_stock:
        stmt = stmt.where(Obat.jumlah <= Obat.batas_minimal)
    stmt = stmt.order_by(Obat.created_at.desc(), Obat.id.desc())
    return list(db.execute(stmt).scalars().all())


def get_obat(db: Session, obat_id: int, locations: frozenset[Lokasi]) -> Obat:
    obat = db.execute(_visible(locations).where(Obat.id == obat_id)).scalars().first()
    if obat is None:
        raise RecordNotFound("Medicine not found")
    return obat


def _commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def create_obat(
    db: Session,
    payload: ObatCreate,
    locations: frozenset[Lokasi],
    *,
    user_id: Optional[int] = None,
) -> Obat:
    ensure_location_allowed(payload.lokasi, locations)
    obat = Obat(
        nama_obat=payload.nama_obat,
        jumlah=payload.jumlah,
        lokasi=payload.lokasi,
        satuan=payload.satuan,
        tanggal_kadaluarsa=payload.tanggal_kadaluarsa,
        batas_minimal=payload.batas_minimal,
        keterangan=payload.keterangan,
        created_by_user_id=user_id,
    )
    db.add(obat)
    _commit(db)
    db.refresh(obat)
    logger.info("Created medicine %s (%s) at %s", obat.id, obat.nama_obat, obat.lokasi)
    return obat


def update_obat(
    db: Session,
    obat_id: int,
    payload: ObatUpdate,
    locations: frozenset[Lokasi],
) -> Obat:
    obat = get_obat(db, obat_id, locations)
    ensure_location_allowed(payload.lokasi, locations)

    obat.nama_obat = payload.nama_obat
    obat.jumlah = payload.jumlah
    obat.lokasi = payload.lokasi
    obat.satuan = payload.satuan
    obat.tanggal_kadaluarsa = payload.tanggal_kadaluarsa
    obat.batas_minimal = payload.batas_minimal
    obat.keterangan = payload.keterangan
    _commit(db)
    db.refresh(obat)
    return obat


def soft_delete_obat(db: Session, obat_id: int, locations: frozenset[Lokasi]) -> Obat:
    obat = get_obat(db, obat_id, locations)
    obat.deleted_at = utcnow()
    _commit(db)
    logger.info("Soft-deleted medicine %s", obat_id)
    return obat


def record_usage(
    db: Session,
    obat_id: int,
    jumlah_keluar: int,
    locations: frozenset[Lokasi],
    *,
    keterangan: Optional[str] = None,
    user_id: Optional[int] = None,
) -> Obat:
    """Take stock out of a medicine and append the matching ledger row.

    The decrement is a single conditional UPDATE guarded by ``jumlah >= n``,
    so two concurrent requests can never drive the stock below zero. The
    ledger insert shares the transaction: both land or neither does.
    """
    if jumlah_keluar is None or jumlah_keluar <= 0:
        raise ValidationFailed(
            "Invalid usage quantity",
            {"jumlah_keluar": "must be greater than 0"},
        )

    obat = get_obat(db, obat_id, locations)
    now = utcnow()
    try:
        result = db.execute(
            update(Obat)
            .where(
                Obat.id == obat.id,
                Obat.deleted_at.is_(None),
                Obat.jumlah >= jumlah_keluar,
            )
            .values(jumlah=Obat.jumlah - jumlah_keluar, updated_at=now)
        )
        if result.rowcount != 1:
            db.rollback()
            raise ValidationFailed(
                "Insufficient stock",
                {"jumlah_keluar": f"exceeds current stock ({obat.jumlah})"},
            )
        db.add(
            RiwayatObat(
                obat_id=obat.id,
                jumlah_keluar=jumlah_keluar,
                tanggal_keluar=now,
                keterangan=keterangan or MANUAL_USAGE_NOTE,
                created_by_user_id=user_id,
            )
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(obat)
    logger.info(
        "Recorded usage of %s from medicine %s; remaining stock %s",
        jumlah_keluar,
        obat.id,
        obat.jumlah,
    )
    return obat


def _expired_criteria(locations: frozenset[Lokasi], today: date) -> tuple:
    return (
        Obat.tanggal_kadaluarsa.is_not(None),
        Obat.tanggal_kadaluarsa < today,
        Obat.lokasi.in_(location_values(locations)),
        Obat.deleted_at.is_(None),
    )


def sweep_expired(db: Session, locations: frozenset[Lokasi], today: Optional[date] = None) -> int:
    """Zero out stock of expired medicines and log each removal.

    Each row moves from its observed quantity to 0 with a compare-and-swap
    that re-checks the expiry, location and deletion criteria, so a row
    changed since it was selected is left for the next pass. Returns the
    number of medicines zeroed.
    """
    today = today or date.today()
    expired = _expired_criteria(locations, today)
    candidates = db.execute(
        select(Obat.id, Obat.jumlah).where(*expired, Obat.jumlah > 0)
    ).all()
    if not candidates:
        return 0

    note = EXPIRED_USAGE_NOTE.format(date=format_id_date(today))
    now = utcnow()
    swept = 0
    try:
        for obat_id, observed in candidates:
            result = db.execute(
                update(Obat)
                .where(Obat.id == obat_id, Obat.jumlah == observed, *expired)
                .values(jumlah=0, updated_at=now)
            )
            if result.rowcount != 1:
                logger.info("Medicine %s changed during expiry sweep; skipped", obat_id)
                continue
            db.add(
                RiwayatObat(
                    obat_id=obat_id,
                    jumlah_keluar=observed,
                    tanggal_keluar=now,
                    keterangan=note,
                )
            )
            swept += 1
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "Expiry sweep on %s zeroed %s medicine(s) in %s",
        today.isoformat(),
        swept,
        ",".join(location_values(locations)),
    )
    return swept


def sweep_before_read(
    db: Session,
    locations: frozenset[Lokasi],
    today: Optional[date] = None,
) -> int:
    if not get_settings().EXPIRY_SWEEP_ON_READ:
        return 0
    return sweep_expired(db, locations, today)


def list_riwayat(
    db: Session,
    locations: frozenset[Lokasi],
    *,
    obat_id: Optional[int] = None,
) -> list[dict]:
    stmt = (
        select(RiwayatObat, Obat.nama_obat, Obat.lokasi)
        .join(Obat, RiwayatObat.obat_id == Obat.id)
        .where(Obat.lokasi.in_(location_values(locations)))
    )
    if obat_id is not None:
        stmt = stmt.where(RiwayatObat.obat_id == obat_id)
    stmt = stmt.order_by(RiwayatObat.created_at.desc(), RiwayatObat.id.desc())

    results = []
    for riwayat, nama_obat, lokasi in db.execute(stmt).all():
        results.append(
            {
                "id": riwayat.id,
                "obat_id": riwayat.obat_id,
                "jumlah_keluar": riwayat.jumlah_keluar,
                "tanggal_keluar": riwayat.tanggal_keluar,
                "keterangan": riwayat.keterangan,
                "created_by_user_id": riwayat.created_by_user_id,
                "created_at": riwayat.created_at,
                "nama_obat": nama_obat,
                "lokasi": lokasi,
            }
        )
    return results


__all__ = [
    "create_obat",
    "get_obat",
    "list_obat",
    "list_riwayat",
    "record_usage",
    "soft_delete_obat",
    "sweep_before_read",
    "sweep_expired",
    "update_obat",
]
