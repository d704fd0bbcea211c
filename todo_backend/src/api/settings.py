from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - DATABASE_URL: SQLAlchemy database URL. Default 'sqlite:///./data/todos.db'
    - DB_POOL_SIZE: pooled connections kept open for server databases (default: 5)
    - DB_MAX_OVERFLOW: extra connections allowed above the pool size (default: 10)
    - DB_ECHO: 'true' to log every emitted SQL statement (default: false)
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: level for application loggers (default: INFO)
    - HOST / PORT: bind address used by the todo-server entry point (0.0.0.0:5000)
    """

    database_url: str
    db_pool_size: int
    db_max_overflow: int
    db_echo: bool
    cors_allow_origins: List[str]
    log_level: str
    host: str
    port: int


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


def _parse_int(value: str, default: int) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


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
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    log_level = _get_env("LOG_LEVEL", "INFO").strip().upper()
    if log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        log_level = "INFO"

    return Settings(
        database_url=_get_env("DATABASE_URL", "sqlite:///./data/todos.db").strip(),
        db_pool_size=_parse_int(_get_env("DB_POOL_SIZE", "5"), 5),
        db_max_overflow=_parse_int(_get_env("DB_MAX_OVERFLOW", "10"), 10),
        db_echo=_parse_bool(_get_env("DB_ECHO", "false"), False),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=log_level,
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_int(_get_env("PORT", "5000"), 5000),
    )
