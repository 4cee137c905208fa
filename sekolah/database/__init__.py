from sekolah.database.base import Base
from sekolah.database.engine import engine, ensure_sqlite_schema
from sekolah.database.session import SessionLocal, get_db

__all__ = ["Base", "engine", "ensure_sqlite_schema", "SessionLocal", "get_db"]
