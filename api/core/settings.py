"""
Environment-driven settings.

Values are read from the process environment. A local `.env` file, when
present, is loaded once at import time and never overrides real variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from dotenv import load_dotenv

load_dotenv(override=False)

DEFAULT_TABLE_NAME = "city"
DEFAULT_CORS_ORIGINS: tuple[str, ...] = ()


@dataclass(frozen=True)
class DatabaseSettings:
    dsn: str | None
    host: str
    port: int
    user: str | None
    password: str | None
    database: str | None
    table_name: str
    min_size: int
    max_size: int
    command_timeout: float | None


def _env_str(name: str, default: str | None = None) -> str | None:
    raw = os.environ.get(name, "").strip()
    return raw or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str) -> float | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str | None:
    url = _env_str("DATABASE_URL")
    if url is None:
        return None
    return _sanitize_database_url(url)


def table_name() -> str:
    return _env_str("TABLE_NAME", DEFAULT_TABLE_NAME) or DEFAULT_TABLE_NAME


def database_settings() -> DatabaseSettings:
    min_size = max(0, _env_int("DB_POOL_MIN_SIZE", 1))
    max_size = max(1, _env_int("DB_POOL_MAX_SIZE", 10))
    return DatabaseSettings(
        dsn=database_url(),
        host=_env_str("DB_HOST", "localhost") or "localhost",
        port=_env_int("DB_PORT", 5432),
        user=_env_str("DB_USER"),
        password=_env_str("DB_PASSWORD"),
        database=_env_str("DB_NAME"),
        table_name=table_name(),
        min_size=min(min_size, max_size),
        max_size=max_size,
        command_timeout=_env_float("DB_COMMAND_TIMEOUT"),
    )


def log_level() -> str:
    return (_env_str("LOG_LEVEL", "INFO") or "INFO").upper()


def cors_origins() -> list[str]:
    raw = _env_str("CORS_ORIGINS")
    if raw is None:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
