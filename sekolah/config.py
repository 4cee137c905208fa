from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Inventaris Sekolah"
    ENVIRONMENT: str = "local"
    FRONTEND_DIR: Optional[str] = None
    CORS_ORIGINS: str = "*"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./inventaris.db"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    LOG_SQL: bool = False

    # ==============================
    # Security
    # ==============================
    SESSION_SECRET: Optional[str] = None
    SESSION_COOKIE: str = "inventaris_session"
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_MINUTES: int = 12 * 60
    PBKDF2_ROUNDS: int = 200_000

    # ==============================
    # Medicine stock
    # ==============================
    EXPIRY_SWEEP_ON_READ: bool = True
    EXPIRING_SOON_DAYS: int = 30
    DEFAULT_SATUAN: str = "pcs,botol,tablet,strip,box,roll"

    # ==============================
    # Reports
    # ==============================
    TK_DISPLAY_LABEL: str = "TBSD"

    @property
    def default_satuan_list(self) -> list[str]:
        return [value.strip() for value in self.DEFAULT_SATUAN.split(",") if value.strip()]

    @property
    def cors_origin_list(self) -> list[str]:
        return [value.strip() for value in self.CORS_ORIGINS.split(",") if value.strip()]


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
