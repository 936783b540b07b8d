from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    # Application
    ENVIRONMENT: Literal["local", "development", "test", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./petstore.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800
    AUTO_CREATE_TABLES: bool = False
    SEED_DATA: bool = False

    # Auth
    JWT_SECRET: str = "change-me-petstore-jwt-secret-change-me-petstore-jwt-secret"
    JWT_ALGORITHM: str = "HS512"
    JWT_EXPIRATION_MINUTES: int = 60 * 24

    # Default admin created by the seeder
    ADMIN_EMAIL: str = "admin@pawfect.com"
    ADMIN_PASSWORD: str = "admin123"

    # Orders: "uuid", "sequential" or "timebased"
    ORDER_NUMBER_GENERATOR: str = "uuid"

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    AUTH_RATE_LIMIT: str = "10/minute"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str]) -> str:
        if isinstance(v, str):
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+psycopg://", 1)
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
