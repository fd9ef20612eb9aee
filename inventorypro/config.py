from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "InventoryPro"
    ENVIRONMENT: str = "local"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./inventory.db"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    LOG_SQL: bool = False

    # ==============================
    # Security
    # ==============================
    API_KEYS: Optional[str] = None
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"

    # ==============================
    # Email (low-stock alerts)
    # ==============================
    EMAIL_API_URL: str = "https://api.resend.com/emails"
    EMAIL_API_KEY: Optional[str] = None
    EMAIL_FROM: str = "InventoryPro <onboarding@resend.dev>"
    ALERT_RECIPIENT_EMAIL: Optional[str] = None

    # ==============================
    # Inventory
    # ==============================
    MOVEMENT_LIST_LIMIT: int = 100

    # ==============================
    # Preferences
    # ==============================
    PREFERENCES_PATH: str = "preferences.json"


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
