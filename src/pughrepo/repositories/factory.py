"""Repository construction. Backends are chosen by injection."""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from pughrepo.config import Settings, create_app_engine
from pughrepo.constants import DEFAULT_STORAGE_PREFIX, StorageBackend
from pughrepo.logging_config import setup_logging
from pughrepo.models.base import Base
from pughrepo.repositories.keyed import KeyValueObjectStore, KeyValueRefStore
from pughrepo.repositories.kv_store import SqlKeyValueStore
from pughrepo.repositories.matrix_repo import MatrixRepository
from pughrepo.repositories.memory import MemoryObjectStore, MemoryRefStore
from pughrepo.repositories.protocols import KeyValueStore

logger = logging.getLogger(__name__)


def create_memory_repository() -> MatrixRepository:
    return MatrixRepository(MemoryObjectStore(), MemoryRefStore())


def create_keyed_repository(
    kv: KeyValueStore,
    prefix: str = DEFAULT_STORAGE_PREFIX,
    *,
    owned_engine: AsyncEngine | None = None,
) -> MatrixRepository:
    """Repository over the ``<prefix>:obj:<id>`` / ``<prefix>:refs`` keys."""
    return MatrixRepository(
        KeyValueObjectStore(kv, prefix),
        KeyValueRefStore(kv, prefix),
        engine=owned_engine,
    )


async def create_sql_repository(
    engine: AsyncEngine,
    prefix: str = DEFAULT_STORAGE_PREFIX,
    *,
    owns_engine: bool = False,
) -> MatrixRepository:
    """Durable repository on a SQL key-value table (created if missing).

    With ``owns_engine`` the repository's ``aclose`` disposes ``engine``.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    return create_keyed_repository(
        SqlKeyValueStore(session_factory),
        prefix,
        owned_engine=engine if owns_engine else None,
    )


def _ensure_sqlite_dir(url: str) -> None:
    if not url.startswith("sqlite:///"):
        return
    path = url[len("sqlite:///"):]
    if path and path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)


async def create_repository(
    settings: Settings, engine: AsyncEngine | None = None
) -> MatrixRepository:
    """Build the backend named by ``settings.storage_backend``.

    Configures logging at ``settings.log_level`` on first use. A
    caller-supplied engine is used as-is and stays owned by the caller;
    otherwise one is created from ``settings.database_url`` and disposed
    by the repository's ``aclose``.
    """
    setup_logging(settings.log_level)
    if settings.storage_backend == StorageBackend.MEMORY:
        return create_memory_repository()

    _ensure_sqlite_dir(settings.database_url)
    owns_engine = engine is None
    if engine is None:
        engine = create_app_engine(
            settings.database_url, echo=settings.debug_mode
        )
    logger.info(
        "event=repository_open backend=%s prefix=%s",
        settings.storage_backend.value,
        settings.storage_prefix,
    )
    return await create_sql_repository(
        engine, settings.storage_prefix, owns_engine=owns_engine
    )
