from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sekolah.dependencies import get_current_user, get_db, role_scope
from sekolah.models.user import User
from sekolah.schemas.dashboard import DashboardStats
from sekolah.services.dashboard_service import dashboard_stats

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/{role}", response_model=DashboardStats)
def get_dashboard(
    role: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    locations = role_scope(role, user)
    return dashboard_stats(db, locations)


__all__ = ["router"]
