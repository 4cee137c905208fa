from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from sekolah.core.constants import Lokasi
from sekolah.dependencies import get_current_user, get_db, role_scope
from sekolah.models.user import User
from sekolah.schemas.inventaris import InventarisRead
from sekolah.schemas.obat import ObatRead
from sekolah.services.report_export import render_report
from sekolah.services.report_service import (
    build_report,
    load_report_data,
    period_label,
    report_statistics,
    sort_obat,
)

router = APIRouter(prefix="/api/laporan", tags=["Laporan"])

ReportType = Literal["overview", "inventory", "medicine", "condition", "all"]
ExportFormat = Literal["pdf", "xlsx"]


@router.get("/{role}")
def report_data(
    role: str,
    lokasi: Optional[Lokasi] = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    locations = role_scope(role, user)
    inventaris, obat = load_report_data(db, locations, lokasi=lokasi.value if lokasi else None)
    return {
        "inventaris": [InventarisRead.model_validate(item) for item in inventaris],
        "obat": [ObatRead.model_validate(item) for item in sort_obat(obat)],
        "statistik": report_statistics(inventaris, obat),
    }


@router.get("/{role}/export")
def export_report(
    role: str,
    fmt: ExportFormat = Query("pdf", alias="format"),
    report_type: ReportType = Query("overview"),
    lokasi: Optional[Lokasi] = Query(None),
    period: Optional[str] = Query(None, max_length=80),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    locations = role_scope(role, user)
    lokasi_value = lokasi.value if lokasi else None
    inventaris, obat = load_report_data(db, locations, lokasi=lokasi_value)
    report = build_report(
        report_type,
        inventaris,
        obat,
        period=period_label(period, lokasi_value),
    )
    content, media_type, filename = render_report(report, fmt)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


__all__ = ["router"]
