"""
Centralized configuration management.

Rules:
- All secrets (DB URLs, JWT keys) MUST come from environment variables
  or a secure secret store (never hardcoded)
- Centralize configuration in this module
- Do not spread os.getenv calls all over the codebase
- Do not log secrets or environment values
- Values are read once at process start; nothing rotates mid-process
"""
from __future__ import annotations
from urllib.parse import quote_plus
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # --- Database ---
    DATABASE_URL: str | None = Field(default=None, description="Full SQLAlchemy URL (overrides PG_*)")
    PG_HOST: str = Field(default="localhost", description="PostgreSQL host")
    PG_PORT: int = Field(default=5432, description="PostgreSQL port")
    PG_DB: str = Field(default="tenantguard", description="PostgreSQL database name")
    PG_USER: str = Field(default="postgres", description="PostgreSQL user")
    PG_PASSWORD: str = Field(default="", description="PostgreSQL password")
    PG_SSLMODE: str = Field(default="prefer", description="PostgreSQL SSL mode (require/prefer/disable)")
    DB_CREATE_SCHEMA: bool = Field(default=True, description="Create tables on startup")

    # --- JWT ---
    JWT_SECRET: str = Field(..., description="JWT signing secret key")
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT signing algorithm")
    JWT_EXP_MIN: int | None = Field(default=None, ge=1, description="JWT expiration in minutes (unset = no expiry)")

    # --- Password hashing ---
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31, description="bcrypt work factor")

    # --- Tenancy ---
    TENANT_HEADER: str = Field(default="x-tenant", description="Header carrying the tenant identifier")

    # --- CORS ---
    CORS_ORIGINS: str = Field(default="*", description="CORS allowed origins (comma-separated)")

    # --- Logging ---
    LOG_LEVEL: str = Field(default="INFO", description="Log level for the tenantguard logger")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL, assembled from the PG_* parts unless DATABASE_URL is set."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{quote_plus(self.PG_USER)}:{quote_plus(self.PG_PASSWORD)}"
            f"@{self.PG_HOST}:{self.PG_PORT}/{self.PG_DB}?sslmode={self.PG_SSLMODE}"
        )

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
