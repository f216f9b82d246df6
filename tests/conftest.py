"""Shared test fixtures: memory repository, SQLite, event builders."""

from __future__ import annotations

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from pughrepo.config import Settings
from pughrepo.events.types import (
    CriterionAdded,
    CriterionRemoved,
    ScoreSet,
    ToolAdded,
    WeightSet,
)
from pughrepo.ids import event_id, now_ms
from pughrepo.models.base import Base
from pughrepo.repositories.factory import create_memory_repository
from pughrepo.repositories.matrix_repo import MatrixRepository

USER = "alice"


def criterion_added(
    criterion_id: str, label: str | None = None
) -> CriterionAdded:
    return CriterionAdded(
        id=event_id(),
        timestamp=now_ms(),
        user=USER,
        criterion_id=criterion_id,
        label=label or criterion_id,
    )


def criterion_removed(criterion_id: str) -> CriterionRemoved:
    return CriterionRemoved(
        id=event_id(),
        timestamp=now_ms(),
        user=USER,
        criterion_id=criterion_id,
    )


def tool_added(tool_id: str, label: str | None = None) -> ToolAdded:
    return ToolAdded(
        id=event_id(),
        timestamp=now_ms(),
        user=USER,
        tool_id=tool_id,
        label=label or tool_id,
    )


def score_set(
    tool_id: str,
    criterion_id: str,
    score: float | None,
    *,
    comment: str | None = None,
) -> ScoreSet:
    return ScoreSet(
        id=event_id(),
        timestamp=now_ms(),
        user=USER,
        tool_id=tool_id,
        criterion_id=criterion_id,
        score=score,
        comment=comment,
    )


def weight_set(criterion_id: str, weight: float) -> WeightSet:
    return WeightSet(
        id=event_id(),
        timestamp=now_ms(),
        user=USER,
        criterion_id=criterion_id,
        weight=weight,
    )


@pytest.fixture
def repo() -> MatrixRepository:
    return create_memory_repository()


@pytest.fixture
def settings() -> Settings:
    """Memory backend with a near-zero debounce, isolated from .env."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        storage_backend="memory",  # type: ignore[arg-type]
        autocommit_debounce_seconds=0.01,
        default_author=USER,
    )


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database per test; the KV store commits for real."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)
