"""Environment-based configuration and engine construction."""

from __future__ import annotations

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from pughrepo.constants import (
    AUTOCOMMIT_DEBOUNCE_SECONDS,
    DEFAULT_STORAGE_PREFIX,
    KEY_SEPARATOR,
    MAIN_BRANCH,
    SYSTEM_USER,
    StorageBackend,
)

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Reads from .env file and environment variables."""

    # Storage
    storage_backend: StorageBackend = StorageBackend.MEMORY
    database_url: str = "sqlite:///data/pughrepo.db"
    storage_prefix: str = DEFAULT_STORAGE_PREFIX

    # History
    default_branch: str = MAIN_BRANCH
    default_author: str = SYSTEM_USER

    # Session
    autocommit_debounce_seconds: float = AUTOCOMMIT_DEBOUNCE_SECONDS

    # Logging
    log_level: str = "INFO"
    debug_mode: bool = False

    @field_validator("storage_prefix")
    @classmethod
    def _validate_prefix(cls, v: str) -> str:
        if not v:
            raise ValueError("storage_prefix must not be empty")
        if KEY_SEPARATOR in v:
            raise ValueError(
                f"storage_prefix must not contain {KEY_SEPARATOR!r}"
            )
        return v

    @field_validator("autocommit_debounce_seconds")
    @classmethod
    def _validate_debounce(cls, v: float) -> float:
        if v < 0:
            raise ValueError(
                "autocommit_debounce_seconds must be >= 0"
            )
        return v

    @field_validator("default_branch")
    @classmethod
    def _validate_branch(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("default_branch must not be blank")
        if stripped != v:
            logger.warning(
                "Stripped whitespace from DEFAULT_BRANCH: %r", v
            )
        return stripped

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "PUGHREPO_",
        "extra": "ignore",
    }


def create_app_engine(
    url: str, *, echo: bool = False
) -> AsyncEngine:
    """Create async SQLite engine with WAL journal mode.

    Handles URL conversion (sqlite:/// → sqlite+aiosqlite:///)
    and sets WAL mode via a pool-connect event listener so it
    fires once per raw DBAPI connection, not per ORM session.
    """
    if url.startswith("sqlite:///"):
        db_url = "sqlite+aiosqlite:///" + url[len("sqlite:///"):]
    else:
        db_url = url
    engine = create_async_engine(db_url, echo=echo)

    @event.listens_for(engine.sync_engine, "connect")
    def _set_wal_mode(
        dbapi_conn: object,
        _connection_record: object,
    ) -> None:
        cursor = dbapi_conn.cursor()  # type: ignore[union-attr]
        cursor.execute("PRAGMA journal_mode=WAL")  # pyright: ignore[reportUnknownMemberType]
        cursor.close()  # pyright: ignore[reportUnknownMemberType]

    return engine
