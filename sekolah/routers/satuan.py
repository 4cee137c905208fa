from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sekolah.dependencies import get_current_user, get_db, require_admin
from sekolah.schemas.obat import SatuanCreate
from sekolah.services.satuan_service import add_satuan, list_satuan

router = APIRouter(prefix="/api/satuan", tags=["Satuan"])


@router.get("", dependencies=[Depends(get_current_user)])
def units(db: Session = Depends(get_db)):
    return {"satuan": list_satuan(db)}


@router.post("", status_code=201, dependencies=[Depends(require_admin)])
def create_unit(payload: SatuanCreate, db: Session = Depends(get_db)):
    satuan = add_satuan(db, payload.nama)
    return {"id": satuan.id, "nama": satuan.nama, "is_active": satuan.is_active}


__all__ = ["router"]
