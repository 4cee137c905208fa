from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sekolah.core.access import location_values
from sekolah.core.constants import Lokasi
from sekolah.dependencies import caller_locations, get_current_user, get_db, role_scope
from sekolah.models.user import User
from sekolah.schemas.obat import (
    ObatCreate,
    ObatRead,
    ObatUpdate,
    ObatUsageRequest,
    RiwayatObatRead,
    SweepResult,
)
from sekolah.services.obat_service import (
    create_obat,
    get_obat,
    list_obat,
    list_riwayat,
    record_usage,
    soft_delete_obat,
    sweep_before_read,
    sweep_expired,
    update_obat,
)

router = APIRouter(prefix="/api/obat", tags=["Obat"])


@router.post("/usage", response_model=ObatRead)
def use_medicine(
    payload: ObatUsageRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    locations: frozenset[Lokasi] = Depends(caller_locations),
):
    sweep_before_read(db, locations)
    return record_usage(
        db,
        payload.obat_id,
        payload.jumlah_keluar,
        locations,
        keterangan=payload.keterangan,
        user_id=user.id,
    )


@router.get("/riwayat/{role}", response_model=list[RiwayatObatRead])
def usage_history(
    role: str,
    obat_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    locations = role_scope(role, user)
    sweep_before_read(db, locations)
    return list_riwayat(db, locations, obat_id=obat_id)


@router.post("/sweep/{role}", response_model=SweepResult)
def run_sweep(
    role: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    locations = role_scope(role, user)
    count = sweep_expired(db, locations)
    return SweepResult(
        expired_count=count,
        locations=location_values(locations),
        swept_on=date.today(),
    )


@router.get("/item/{obat_id}", response_model=ObatRead)
def read_medicine(
    obat_id: int,
    db: Session = Depends(get_db),
    locations: frozenset[Lokasi] = Depends(caller_locations),
):
    sweep_before_read(db, locations)
    return get_obat(db, obat_id, locations)


@router.put("/item/{obat_id}", response_model=ObatRead)
def edit_medicine(
    obat_id: int,
    payload: ObatUpdate,
    db: Session = Depends(get_db),
    locations: frozenset[Lokasi] = Depends(caller_locations),
):
    return update_obat(db, obat_id, payload, locations)


@router.delete("/item/{obat_id}")
def delete_medicine(
    obat_id: int,
    db: Session = Depends(get_db),
    locations: frozenset[Lokasi] = Depends(caller_locations),
):
    soft_delete_obat(db, obat_id, locations)
    return {"success": True}


@router.get("/{role}", response_model=list[ObatRead])
def list_medicines(
    role: str,
    lokasi: Optional[Lokasi] = Query(None, description="Restrict to one location"),
    q: Optional[str] = Query(None, description="Search name or note"),
    low_stock: bool = Query(False, description="Only medicines at or below their minimum"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    locations = role_scope(role, user)
    sweep_before_read(db, locations)
    return list_obat(
        db,
        locations,
        lokasi=lokasi.value if lokasi else None,
        query=q,
        low_stock=low_stock,
    )


@router.post("", status_code=201)
def create_medicine(
    payload: ObatCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    locations: frozenset[Lokasi] = Depends(caller_locations),
):
    obat = create_obat(db, payload, locations, user_id=user.id)
    return {"id": obat.id}


__all__ = ["router"]
