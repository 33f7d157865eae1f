"""
Application settings.

Values come from environment variables or a local ``.env`` file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the hostel booker."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Hostel booker"
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    DATABASE_URL: str = "sqlite:///./data/hostel_booking.db"

    # JWT configuration
    SECRET_KEY: str = "change-me-hostel-booker-secret"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Booking rules
    CANCELLATION_WINDOW_HOURS: int = Field(default=24, ge=0)
    ENFORCE_NO_OVERLAP: bool = True
    STRICT_STATUS_TRANSITIONS: bool = False

    DEFAULT_PAGE_SIZE: int = Field(default=10, gt=0)
    MAX_PAGE_SIZE: int = Field(default=100, gt=0)

    # Optional administrator created at startup
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None
    ADMIN_NAME: str = "Admin User"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
