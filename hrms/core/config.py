# hrms/core/config.py
import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from .env"""

    # === Application ===
    APP_NAME: str = "HR Management System"
    APP_BASE_URL: str = "http://localhost:3000"

    # === Database ===
    DATABASE_URL: str = "sqlite+aiosqlite:///./hrms.db"

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v):
        """Ensure database URL is safe for current environment and uses an async driver"""
        if v.startswith("postgres://"):
            v = "postgresql://" + v[len("postgres://"):]
        if v.startswith("postgresql://"):
            v = "postgresql+asyncpg://" + v[len("postgresql://"):]
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env == "production" and ("localhost" in v or v.startswith("sqlite")):
            raise ValueError("Production environment cannot use a local database!")
        return v

    # === Celery ===
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/1"

    # === CORS ===
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:8080"]
    ALLOWED_METHODS: List[str] = ["*"]
    ALLOWED_HEADERS: List[str] = ["*"]

    # === SMTP (Email) ===
    MAIL_SERVER: Optional[str] = None
    MAIL_PORT: Optional[int] = None
    MAIL_USERNAME: Optional[str] = None
    MAIL_PASSWORD: Optional[str] = None
    MAIL_FROM: Optional[str] = None
    MAIL_FROM_NAME: Optional[str] = "HR Team"
    MAIL_TLS: bool = True
    MAIL_SSL: bool = False

    # === System ===
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    TIMEZONE: str = "UTC"

    # === Business Rules ===
    LATE_GRACE_MINUTES: int = 1
    OVERTIME_THRESHOLD_MINUTES: int = 0
    EMPLOYEE_CODE_MAX_RETRIES: int = 5
    CLOCK_IN_REMINDER_LEAD_MINUTES: int = 15
    REMINDER_WINDOW_MINUTES: int = 10
    DEFAULT_WORKING_HOURS_START: str = "09:00:00"
    DEFAULT_WORKING_HOURS_END: str = "18:00:00"
    GOAL_REMINDER_DAYS: int = 7
    GOAL_URGENT_REMINDER_DAYS: int = 3
    ASSET_CODE_DIGITS: int = 4

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


# Create a global settings instance
settings = Settings()
