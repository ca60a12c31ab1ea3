from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

# The HTTP listener port is fixed; only the bind address is configurable.
LISTEN_PORT = 3000


@dataclass(frozen=True)
class DatabaseSettings:
    """
    Connection parameters for the relational store.

    Env vars:
    - DB_HOST, DB_USER, DB_PASSWORD, DB_DATABASE, DB_PORT: connection parts
    - DB_CONNECTION_LIMIT: max simultaneous pooled connections (default: 10)
    - DB_POOL_TIMEOUT: seconds a request may wait for a free connection;
      unset means wait indefinitely
    - DATABASE_URL: full SQLAlchemy URL, overrides the DB_* parts when set
    """

    host: str = "localhost"
    user: str = "root"
    password: str = "pass@123"
    database: str = "medlink"
    port: int = 3306
    connection_limit: int = 10
    pool_timeout: Optional[float] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - APP_HOST: bind address for the HTTP listener (default: 0.0.0.0)
    - LOG_LEVEL: root logging level (default: INFO)
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    """

    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    host: str = "0.0.0.0"
    port: int = LISTEN_PORT
    log_level: str = "INFO"
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_timeout(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    try:
        parsed = float(value.strip())
    except ValueError:
        return None
    return parsed if parsed > 0 else None


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_database_settings() -> DatabaseSettings:
    """Return database connection settings, falling back to built-in defaults."""
    defaults = DatabaseSettings()
    url = os.getenv("DATABASE_URL") or None
    return DatabaseSettings(
        host=_get_env("DB_HOST", defaults.host),
        user=_get_env("DB_USER", defaults.user),
        password=_get_env("DB_PASSWORD", defaults.password),
        database=_get_env("DB_DATABASE", defaults.database),
        port=_parse_int(_get_env("DB_PORT", str(defaults.port)), defaults.port),
        connection_limit=_parse_int(
            _get_env("DB_CONNECTION_LIMIT", str(defaults.connection_limit)),
            defaults.connection_limit,
        ),
        pool_timeout=_parse_timeout(os.getenv("DB_POOL_TIMEOUT")),
        url=url.strip() if url else None,
    )


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    return Settings(
        database=get_database_settings(),
        host=_get_env("APP_HOST", "0.0.0.0").strip(),
        port=LISTEN_PORT,
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
    )


# PUBLIC_INTERFACE
def load_settings() -> Settings:
    """
    Load a .env file from the working directory (variables already set in the
    environment win), then return the resulting settings.
    """
    load_dotenv(find_dotenv(usecwd=True))
    return get_settings()
