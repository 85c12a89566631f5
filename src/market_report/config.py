"""Application configuration using pydantic-settings."""

import re
from typing import Final, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_IDENTIFIER_PATTERN: Final = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MARKET_REPORT_",
        extra="ignore",
    )

    # Database
    database_path: str = Field(default="data/mls.db")
    listings_table: str = Field(
        default="listings",
        description="Append-only table of listing snapshots",
    )
    developments_table: str = Field(
        default="development_data",
        description="Secondary table mapping parcels/addresses to developments",
    )
    pool_size: int = Field(default=5, ge=1, le=64)
    pool_timeout_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Seconds to wait for a free connection before failing the request",
    )

    # Area profiles
    area_source: Literal["static", "database"] = Field(
        default="database",
        description="Resolve area profiles from the static table or live distinct values",
    )

    # Reports
    default_limit: int = Field(default=50, ge=1)
    max_limit: int = Field(default=500, ge=1)
    trailing_window_days: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Window for recent sales and price changes",
    )

    # Web server
    web_host: str = Field(default="0.0.0.0", description="Web server host")
    web_port: int = Field(default=3001, description="Web server port")
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins",
    )

    # Logging
    log_json: bool = Field(default=False, description="Emit JSON logs instead of console output")
    log_level: str = Field(default="INFO")

    @field_validator("listings_table", "developments_table")
    @classmethod
    def validate_table_name(cls, v: str) -> str:
        """Table names are interpolated into SQL, so only plain identifiers are allowed."""
        if not _IDENTIFIER_PATTERN.match(v):
            raise ValueError(f"invalid table name: {v!r}")
        return v

    def get_cors_origins(self) -> list[str]:
        """Parse cors_origins string into a list of origins."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
