"""SQL implementation of KeyValueStore, the durable local backend."""

import logging

from sqlalchemy import delete as sa_delete
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pughrepo.models.kv_entry import KeyValueEntry
from pughrepo.resilience.errors import classify_storage_error

logger = logging.getLogger(__name__)


class SqlKeyValueStore:
    """Key-value store that owns its own sessions.

    Every operation opens a short-lived session from the factory, so the
    store can be shared by the repository and a background flush.

    Failures are logged and swallowed: reads behave as if the key were
    absent, writes become no-ops.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        self._session_factory = session_factory

    async def get_item(self, key: str) -> str | None:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(KeyValueEntry.value).where(
                        KeyValueEntry.key == key
                    )
                )
                return result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            _log_failure("get", key, exc)
            return None

    async def set_item(self, key: str, value: str) -> None:
        try:
            async with self._session_factory() as session, session.begin():
                await session.merge(KeyValueEntry(key=key, value=value))
        except SQLAlchemyError as exc:
            _log_failure("set", key, exc)

    async def remove_item(self, key: str) -> None:
        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(
                    sa_delete(KeyValueEntry).where(
                        KeyValueEntry.key == key
                    )
                )
        except SQLAlchemyError as exc:
            _log_failure("remove", key, exc)


def _log_failure(op: str, key: str, exc: BaseException) -> None:
    logger.warning(
        "event=storage_failure op=%s key=%s class=%s error=%s",
        op,
        key,
        classify_storage_error(exc).value,
        exc,
    )
