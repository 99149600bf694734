"""
ERP Equipment Service Configuration
Core settings for the inventory API
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pathlib import Path


class Settings(BaseSettings):
    """Application settings"""

    # Application Info
    APP_NAME: str = "ERP Equipment Inventory API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./erp.db"
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20
    DATABASE_ECHO: bool = False
    SQLITE_BUSY_TIMEOUT: int = 30  # seconds a writer waits for the database lock

    # Security
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # CORS
    CORS_ORIGINS: list = [
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",
    ]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Path = Path("logs")
    LOG_FILE: str = "app.log"
    ERROR_LOG_FILE: str = "error.log"
    LOG_TO_FILE: bool = False

    # API Configuration
    API_V1_STR: str = "/api/v1"

    # Inventory
    DEFAULT_PAGE_SIZE: int = 10
    TRANSACTION_PAGE_SIZE: int = 20
    LOW_STOCK_DEFAULT_LIMIT: int = 5
    RECENT_TRANSACTIONS_IN_LIST: int = 5
    # Reject transaction types outside the known set instead of recording a no-op
    STRICT_TRANSACTION_TYPES: bool = False

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Optional[str]) -> str:
        """Accept lower case level names from the environment"""
        if not v:
            return "INFO"
        return str(v).upper()

    @field_validator("LOG_DIR", mode="before")
    @classmethod
    def coerce_log_dir(cls, v):
        return Path(v) if isinstance(v, str) else v

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


# Global settings instance
settings = Settings()
