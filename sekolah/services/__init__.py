from sekolah.services.dashboard_service import dashboard_stats
from sekolah.services.obat_service import record_usage, sweep_expired
from sekolah.services.report_export import render_report
from sekolah.services.report_service import build_report

__all__ = [
    "build_report",
    "dashboard_stats",
    "record_usage",
    "render_report",
    "sweep_expired",
]
