"""
Configuration data model for modcat.

Settings are loaded once at process start from environment variables
(optionally seeded from .env files) and are immutable afterwards.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConfigError(Exception):
    """Configuration is missing or invalid."""


class CatalogSettings(BaseModel):
    """
    Process-wide settings for the catalog service.

    Example:
        >>> settings = CatalogSettings(
        ...     remote_url="libsql://mods-acme.turso.io",
        ...     remote_auth_token="token",
        ...     sync_token="sync-secret",
        ... )
        >>> settings.db_path
        PosixPath('mods.db')
    """

    model_config = ConfigDict(frozen=True)

    remote_url: str | None = Field(
        default=None,
        description="URL of the remote libsql database (DB_URL)",
    )
    remote_auth_token: str | None = Field(
        default=None,
        description="Auth token for the remote database (AUTH)",
    )
    sync_token: str | None = Field(
        default=None,
        description="Secret required by the sync endpoint (SYNC_AUTH)",
    )
    db_path: Path = Field(
        default=Path("mods.db"),
        description="Local replica file",
    )
    host: str = Field(default="0.0.0.0", description="Address the server binds to")
    port: int = Field(default=8000, ge=1, le=65535, description="Port the server listens on")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by CORS",
    )
    sync_interval_minutes: float = Field(
        default=0,
        ge=0,
        description="Minutes between background syncs (0 disables them)",
    )

    @field_validator("remote_url")
    @classmethod
    def validate_remote_url(cls, v: str | None) -> str | None:
        if v is None:
            return v
        allowed = ("libsql://", "https://", "http://")
        if not v.startswith(allowed):
            raise ValueError(f"remote_url must start with one of {', '.join(allowed)}")
        return v

    def require_remote(self) -> None:
        """
        Ensure everything needed to serve and sync is configured.

        Raises:
            ConfigError: Naming every missing environment variable
        """
        missing = [
            env_var
            for env_var, value in (
                ("DB_URL", self.remote_url),
                ("AUTH", self.remote_auth_token),
                ("SYNC_AUTH", self.sync_token),
            )
            if not value
        ]
        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")
