from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sekolah.config import get_settings
from sekolah.models.master_satuan import MasterSatuan


def list_satuan(db: Session) -> list[str]:
    names = db.execute(
        select(MasterSatuan.nama)
        .where(MasterSatuan.is_active.is_(True))
        .order_by(MasterSatuan.nama.asc())
    ).scalars().all()
    cleaned = [name.strip() for name in names if name and name.strip()]
    if cleaned:
        return cleaned
    return get_settings().default_satuan_list


def add_satuan(db: Session, nama: str) -> MasterSatuan:
    """Add a unit, or reactivate it when a case-insensitive match exists."""
    nama = nama.strip()
    existing = db.execute(
        select(MasterSatuan).where(func.lower(MasterSatuan.nama) == nama.lower())
    ).scalars().first()
    if existing is not None:
        existing.is_active = True
        satuan = existing
    else:
        satuan = MasterSatuan(nama=nama, is_active=True)
        db.add(satuan)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(satuan)
    return satuan


def seed_default_satuan(db: Session) -> int:
    existing = {
        name.lower()
        for name in db.execute(select(MasterSatuan.nama)).scalars().all()
    }
    added = 0
    for nama in get_settings().default_satuan_list:
        if nama.lower() in existing:
            continue
        db.add(MasterSatuan(nama=nama, is_active=True))
        added += 1
    if added:
        try:
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
    return added


__all__ = ["add_satuan", "list_satuan", "seed_default_satuan"]
