"""
Settings loading from the environment.

Environment variables read:
    DB_URL                  remote database URL
    AUTH                    remote database auth token
    SYNC_AUTH               sync endpoint secret
    MODCAT_DB_PATH          local replica file
    MODCAT_HOST             bind address
    MODCAT_PORT             listen port
    MODCAT_CORS_ORIGINS     comma-separated allowed origins
    MODCAT_SYNC_INTERVAL    minutes between background syncs (0 = off)

Call load_layered_env() first if .env files should be honored.
"""

import os
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .models import CatalogSettings, ConfigError

# Global cache so settings are read once per process
_settings_cache: CatalogSettings | None = None

# env var -> settings field
_STRING_VARS = {
    "DB_URL": "remote_url",
    "AUTH": "remote_auth_token",
    "SYNC_AUTH": "sync_token",
    "MODCAT_DB_PATH": "db_path",
    "MODCAT_HOST": "host",
}

_INT_VARS = {
    "MODCAT_PORT": "port",
}

_FLOAT_VARS = {
    "MODCAT_SYNC_INTERVAL": "sync_interval_minutes",
}


def settings_from_env(environ: Mapping[str, str]) -> dict[str, Any]:
    """
    Collect settings values from an environment mapping.

    Empty variables are treated as unset.

    Args:
        environ: Environment mapping (usually os.environ)

    Returns:
        Dict of CatalogSettings field values

    Raises:
        ConfigError: If a numeric variable does not parse
    """
    values: dict[str, Any] = {}

    for env_var, field_name in _STRING_VARS.items():
        if raw := environ.get(env_var):
            values[field_name] = raw

    for env_var, field_name in _INT_VARS.items():
        if raw := environ.get(env_var):
            try:
                values[field_name] = int(raw)
            except ValueError as e:
                raise ConfigError(f"Invalid {env_var} value '{raw}': expected an integer") from e

    for env_var, field_name in _FLOAT_VARS.items():
        if raw := environ.get(env_var):
            try:
                values[field_name] = float(raw)
            except ValueError as e:
                raise ConfigError(f"Invalid {env_var} value '{raw}': expected a number") from e

    if raw := environ.get("MODCAT_CORS_ORIGINS"):
        values["cors_origins"] = [origin.strip() for origin in raw.split(",") if origin.strip()]

    return values


def load_settings(
    environ: Mapping[str, str] | None = None,
    use_cache: bool = True,
    **overrides: Any,
) -> CatalogSettings:
    """
    Load settings from the environment.

    Precedence (highest to lowest):
        1. Keyword overrides (e.g. CLI options)
        2. Environment variables
        3. Model defaults

    Args:
        environ: Environment mapping (defaults to os.environ)
        use_cache: If True, return the cached settings from a previous load
            (ignored when overrides are given)
        **overrides: Field values that win over the environment; None
            values are ignored

    Returns:
        Validated CatalogSettings

    Raises:
        ConfigError: If a value is malformed

    Example:
        >>> settings = load_settings({"DB_URL": "libsql://db.example.io"}, use_cache=False)
        >>> settings.remote_url
        'libsql://db.example.io'
    """
    global _settings_cache

    overrides = {k: v for k, v in overrides.items() if v is not None}

    if use_cache and not overrides and _settings_cache is not None:
        return _settings_cache

    values = settings_from_env(os.environ if environ is None else environ)
    values.update(overrides)

    try:
        settings = CatalogSettings(**values)
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        field = ".".join(str(loc) for loc in first.get("loc", ()))
        raise ConfigError(f"Invalid setting {field}: {first.get('msg', e)}") from e

    if not overrides:
        _settings_cache = settings

    return settings


def clear_cache() -> None:
    """
    Clear the cached settings.

    Useful for testing or when the environment changes during execution.
    """
    global _settings_cache
    _settings_cache = None
