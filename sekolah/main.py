import logging
import secrets
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from sekolah.config import Settings, get_settings
from sekolah.core.logging import setup_logging
from sekolah.database import Base, engine, ensure_sqlite_schema
from sekolah.errors import register_error_handlers
from sekolah.models import import_all_models
from sekolah.routers import (
    auth_router,
    dashboard_router,
    health_router,
    inventaris_router,
    laporan_router,
    obat_router,
    satuan_router,
)

setup_logging()
settings: Settings = get_settings()
logger = logging.getLogger(__name__)

import_all_models()
Base.metadata.create_all(bind=engine)
ensure_sqlite_schema()

app = FastAPI(title=settings.APP_NAME)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET or settings.JWT_SECRET or secrets.token_urlsafe(32),
    session_cookie=settings.SESSION_COOKIE,
    same_site="lax",
    https_only=settings.ENVIRONMENT.lower() != "local",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials="*" not in settings.cors_origin_list,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)

app.include_router(health_router)
app.include_router(auth_router)
app.include_router(dashboard_router)
app.include_router(inventaris_router)
app.include_router(obat_router)
app.include_router(satuan_router)
app.include_router(laporan_router)

# Everything outside /api is the browser bundle, when one is deployed.
if settings.FRONTEND_DIR:
    frontend_dir = Path(settings.FRONTEND_DIR)
    if frontend_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(frontend_dir), html=True), name="frontend")
    else:
        logger.warning("FRONTEND_DIR %s does not exist; static assets disabled.", frontend_dir)
