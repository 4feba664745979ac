from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


class SettingsError(RuntimeError):
    """Raised when the environment does not describe a usable configuration."""


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - DATABASE_URL: SQLAlchemy async database URL (required)
    - DB_MAX_CONNECTIONS: fixed size of the connection pool. Default 5
    - AUTO_CREATE_SCHEMA: 'true' to create the todos table on startup (default: false)
    - HOST: listen address. Default '0.0.0.0'
    - PORT: listen port. Default 3000
    - LOG_LEVEL: root logging level. Default 'INFO'
    """

    database_url: str
    max_connections: int = 5
    auto_create_schema: bool = False
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_positive_int(name: str, value: str) -> int:
    try:
        n = int(value.strip())
    except ValueError as e:
        raise SettingsError(f"{name} must be an integer, got {value!r}") from e
    if n <= 0:
        raise SettingsError(f"{name} must be positive, got {n}")
    return n


def normalize_database_url(url: str) -> str:
    """
    Point plain PostgreSQL URLs at the asyncpg driver.

    'postgres://...' and 'postgresql://...' become 'postgresql+asyncpg://...';
    URLs that already name a driver are returned unchanged.
    """
    scheme, sep, rest = url.partition("://")
    if sep and scheme in {"postgres", "postgresql"}:
        return f"postgresql+asyncpg://{rest}"
    return url


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from the environment (and a local .env file)."""
    load_dotenv()

    database_url = os.getenv("DATABASE_URL", "").strip()
    if not database_url:
        raise SettingsError("DATABASE_URL is not set. Copy .env.example to .env")

    return Settings(
        database_url=normalize_database_url(database_url),
        max_connections=_parse_positive_int(
            "DB_MAX_CONNECTIONS", _get_env("DB_MAX_CONNECTIONS", "5")
        ),
        auto_create_schema=_parse_bool(_get_env("AUTO_CREATE_SCHEMA", "false"), False),
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_positive_int("PORT", _get_env("PORT", "3000")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
