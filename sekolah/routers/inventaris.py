from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sekolah.core.constants import Kategori, Kondisi, Lokasi
from sekolah.dependencies import caller_locations, get_current_user, get_db, role_scope
from sekolah.models.user import User
from sekolah.schemas.inventaris import InventarisCreate, InventarisRead, InventarisUpdate
from sekolah.services.inventaris_service import (
    create_inventaris,
    get_inventaris,
    list_inventaris,
    soft_delete_inventaris,
    update_inventaris,
)

router = APIRouter(prefix="/api/inventaris", tags=["Inventaris"])


@router.get("/item/{item_id}", response_model=InventarisRead)
def read_item(
    item_id: int,
    db: Session = Depends(get_db),
    locations: frozenset[Lokasi] = Depends(caller_locations),
):
    return get_inventaris(db, item_id, locations)


@router.put("/item/{item_id}", response_model=InventarisRead)
def edit_item(
    item_id: int,
    payload: InventarisUpdate,
    db: Session = Depends(get_db),
    locations: frozenset[Lokasi] = Depends(caller_locations),
):
    return update_inventaris(db, item_id, payload, locations)


@router.delete("/item/{item_id}")
def delete_item(
    item_id: int,
    db: Session = Depends(get_db),
    locations: frozenset[Lokasi] = Depends(caller_locations),
):
    soft_delete_inventaris(db, item_id, locations)
    return {"success": True}


@router.get("/{role}", response_model=list[InventarisRead])
def list_items(
    role: str,
    lokasi: Optional[Lokasi] = Query(None, description="Restrict to one location"),
    kategori: Optional[Kategori] = Query(None),
    kondisi: Optional[Kondisi] = Query(None),
    q: Optional[str] = Query(None, description="Search name or note"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    locations = role_scope(role, user)
    return list_inventaris(
        db,
        locations,
        lokasi=lokasi.value if lokasi else None,
        kategori=kategori.value if kategori else None,
        kondisi=kondisi.value if kondisi else None,
        query=q,
    )


@router.post("", status_code=201)
def create_item(
    payload: InventarisCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    locations: frozenset[Lokasi] = Depends(caller_locations),
):
    item = create_inventaris(db, payload, locations, user_id=user.id)
    return {"id": item.id}


__all__ = ["router"]
