from __future__ import annotations

import os
from typing import Any, Dict

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url

from .logger import get_logger
from .settings import Settings

logger = get_logger(__name__)

_SQLITE_SCHEMA = """
CREATE TABLE IF NOT EXISTS todo (
    todo_id INTEGER PRIMARY KEY AUTOINCREMENT,
    description TEXT NOT NULL CHECK (length(description) > 0),
    completed BOOLEAN NOT NULL DEFAULT 0
)
"""

_DEFAULT_SCHEMA = """
CREATE TABLE IF NOT EXISTS todo (
    todo_id BIGSERIAL PRIMARY KEY,
    description TEXT NOT NULL CHECK (length(description) > 0),
    completed BOOLEAN NOT NULL DEFAULT FALSE
)
"""


# PUBLIC_INTERFACE
def create_db_engine(settings: Settings) -> Engine:
    """
    Build the process-wide connection pool for settings.database_url.

    - SQLite files: the parent directory is created and connections may be
      borrowed by any threadpool worker.
    - Server databases: pool_size/max_overflow come from settings and stale
      connections are detected with pool_pre_ping.
    """
    url = make_url(settings.database_url)
    engine_kwargs: Dict[str, Any] = {"echo": settings.db_echo, "future": True}

    if url.get_backend_name() == "sqlite":
        database = url.database or ""
        if database and database != ":memory:":
            os.makedirs(os.path.dirname(database) or ".", exist_ok=True)
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        engine_kwargs["pool_size"] = settings.db_pool_size
        engine_kwargs["max_overflow"] = settings.db_max_overflow
        engine_kwargs["pool_pre_ping"] = True

    engine = create_engine(url, **engine_kwargs)
    logger.info("Database engine created for %s", url.render_as_string(hide_password=True))
    return engine


# PUBLIC_INTERFACE
def init_schema(engine: Engine) -> None:
    """Create the todo table if it does not exist yet."""
    ddl = _SQLITE_SCHEMA if engine.dialect.name == "sqlite" else _DEFAULT_SCHEMA
    with engine.begin() as conn:
        conn.execute(text(ddl))


# PUBLIC_INTERFACE
def get_engine(request: Request) -> Engine:
    """
    FastAPI dependency returning the engine created during application startup.
    """
    return request.app.state.engine
