from sekolah.routers.auth import router as auth_router
from sekolah.routers.dashboard import router as dashboard_router
from sekolah.routers.health import router as health_router
from sekolah.routers.inventaris import router as inventaris_router
from sekolah.routers.laporan import router as laporan_router
from sekolah.routers.obat import router as obat_router
from sekolah.routers.satuan import router as satuan_router

__all__ = [
    "auth_router",
    "dashboard_router",
    "health_router",
    "inventaris_router",
    "laporan_router",
    "obat_router",
    "satuan_router",
]
