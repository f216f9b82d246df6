"""Live editing session over a matrix repository.

A session holds the committed events of the active branch plus a buffer of
pending events. Every dispatch re-projects the state synchronously; pending
events are flushed to the repository as one commit after a debounce delay.
Pending events not yet flushed are lost if the process dies.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from types import TracebackType

from pughrepo import ids
from pughrepo.config import Settings
from pughrepo.constants import (
    INITIAL_COMMIT_COMMENT,
    MergeStrategy,
    RefType,
)
from pughrepo.domain.state import Criterion, DomainState, ScoreEntry, Tool
from pughrepo.domain.values import ScaleType
from pughrepo.events.projection import project_events
from pughrepo.events.seed import seed_events_from_options
from pughrepo.events.types import (
    AnyEvent,
    CriterionAdded,
    CriterionDescriptionChanged,
    CriterionRemoved,
    CriterionRenamed,
    CriterionScaleOverridden,
    MatrixAllowNegativeSet,
    MatrixDefaultScaleSet,
    ScoreSet,
    ToolAdded,
    ToolDescriptionChanged,
    ToolRemoved,
    ToolRenamed,
    WeightSet,
)
from pughrepo.repositories.matrix_repo import MatrixRepository
from pughrepo.repositories.records import BranchDiff, Commit
from pughrepo.resilience.errors import ImmutableRefError, PughRepoError

logger = logging.getLogger(__name__)


class MatrixSession:
    """Projected state, pending buffer and branch controls for one matrix.

    Without a repository the session is purely in-memory: events stay
    pending forever and branch operations raise ``PughRepoError``.
    """

    def __init__(
        self,
        repository: MatrixRepository | None,
        *,
        seed_events: Iterable[AnyEvent] = (),
        author: str,
        default_branch: str,
        debounce_seconds: float,
    ) -> None:
        self._repository = repository
        self._seed_events = list(seed_events)
        self._author = author
        self._default_branch = default_branch
        self._debounce_seconds = debounce_seconds

        self._committed: list[AnyEvent] = list(self._seed_events)
        self._pending: list[AnyEvent] = []
        self._state = project_events(self._committed)
        self._active_branch = default_branch
        self._branch_names: list[str] = [default_branch]
        self._initialized = False
        self._is_loading = False

        self._flush_lock = asyncio.Lock()
        self._timer: asyncio.TimerHandle | None = None
        self._flush_tasks: set[asyncio.Task[Commit | None]] = set()

    # ── Read-only views ──────────────────────────────────

    @property
    def state(self) -> DomainState:
        return self._state

    @property
    def active_branch(self) -> str:
        return self._active_branch

    @property
    def branch_names(self) -> list[str]:
        return list(self._branch_names)

    @property
    def pending_events(self) -> list[AnyEvent]:
        return list(self._pending)

    @property
    def committed_events(self) -> list[AnyEvent]:
        return list(self._committed)

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def repository(self) -> MatrixRepository | None:
        return self._repository

    # ── Lifecycle ────────────────────────────────────────

    async def init(self) -> None:
        """Create or hydrate the default branch. Idempotent."""
        if self._initialized:
            return
        if self._repository is None:
            self._initialized = True
            return

        self._is_loading = True
        try:
            existing = await self._repository.refs.get_ref(
                self._default_branch
            )
            if existing is None:
                await self._repository.commit(
                    self._default_branch,
                    self._seed_events,
                    self._author,
                    INITIAL_COMMIT_COMMENT,
                )
                self._committed = list(self._seed_events)
                logger.info(
                    "event=session_seeded branch=%s events=%d",
                    self._default_branch,
                    len(self._seed_events),
                )
            else:
                self._committed = await self._repository.checkout(
                    self._default_branch
                )
                logger.info(
                    "event=session_hydrated branch=%s events=%d",
                    self._default_branch,
                    len(self._committed),
                )
            self._active_branch = self._default_branch
            self._reproject()
            await self._refresh_branch_names()
            self._initialized = True
        finally:
            self._is_loading = False

        if self._pending:
            self._schedule_flush()

    async def aclose(self) -> None:
        """Cancel the debounce timer and flush what is pending."""
        self._cancel_timer()
        if self._flush_tasks:
            await asyncio.gather(*self._flush_tasks, return_exceptions=True)
        await self.commit_pending()

    async def __aenter__(self) -> MatrixSession:
        await self.init()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # ── Dispatch ─────────────────────────────────────────

    def dispatch(self, event: AnyEvent) -> None:
        """Append ``event`` to the pending buffer and re-project."""
        self._pending.append(event)
        self._reproject()
        self._schedule_flush()

    def _reproject(self) -> None:
        self._state = project_events([*self._committed, *self._pending])

    def _schedule_flush(self) -> None:
        if self._repository is None or not self._initialized:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        if self._timer is not None:
            self._timer.cancel()
        self._timer = loop.call_later(
            self._debounce_seconds, self._start_flush
        )

    def _start_flush(self) -> None:
        self._timer = None
        task = asyncio.create_task(self.commit_pending())
        self._flush_tasks.add(task)
        task.add_done_callback(self._on_flush_done)

    def _on_flush_done(self, task: asyncio.Task[Commit | None]) -> None:
        self._flush_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "event=autocommit_failed branch=%s pending=%d error=%s",
                self._active_branch,
                len(self._pending),
                exc,
            )

    async def commit_pending(
        self, comment: str | None = None
    ) -> Commit | None:
        """Flush pending events as one commit on the active branch.

        Only the flushed prefix is removed, so events dispatched while the
        write is in flight stay pending for the next flush.
        """
        if self._repository is None or not self._initialized:
            return None
        async with self._flush_lock:
            return await self._flush_locked(comment)

    async def _flush_locked(
        self, comment: str | None = None
    ) -> Commit | None:
        # Caller holds _flush_lock, so the active branch cannot change
        # while the write is in flight.
        repo = self._require_repository()
        if not self._pending or not self._initialized:
            return None
        batch = list(self._pending)
        branch = self._active_branch
        commit = await repo.commit(branch, batch, self._author, comment)
        del self._pending[: len(batch)]
        self._committed.extend(batch)
        if branch not in self._branch_names:
            await self._refresh_branch_names()
        return commit

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    # ── Command helpers ──────────────────────────────────

    def _base(self) -> dict[str, object]:
        return {
            "id": ids.event_id(),
            "timestamp": ids.now_ms(),
            "user": self._author,
        }

    def add_criterion(
        self,
        label: str,
        *,
        criterion_id: str | None = None,
        scale: ScaleType | None = None,
    ) -> CriterionAdded:
        event = CriterionAdded(
            **self._base(),
            criterion_id=criterion_id or ids.criterion_id(),
            label=label,
            scale=scale,
        )
        self.dispatch(event)
        return event

    def rename_criterion(
        self, criterion_id: str, new_label: str
    ) -> CriterionRenamed:
        event = CriterionRenamed(
            **self._base(), criterion_id=criterion_id, new_label=new_label
        )
        self.dispatch(event)
        return event

    def remove_criterion(self, criterion_id: str) -> CriterionRemoved:
        event = CriterionRemoved(**self._base(), criterion_id=criterion_id)
        self.dispatch(event)
        return event

    def set_criterion_scale(
        self, criterion_id: str, scale: ScaleType
    ) -> CriterionScaleOverridden:
        event = CriterionScaleOverridden(
            **self._base(), criterion_id=criterion_id, scale=scale
        )
        self.dispatch(event)
        return event

    def set_criterion_description(
        self, criterion_id: str, description: str
    ) -> CriterionDescriptionChanged:
        event = CriterionDescriptionChanged(
            **self._base(),
            criterion_id=criterion_id,
            description=description,
        )
        self.dispatch(event)
        return event

    def add_tool(
        self, label: str, *, tool_id: str | None = None
    ) -> ToolAdded:
        event = ToolAdded(
            **self._base(), tool_id=tool_id or ids.tool_id(), label=label
        )
        self.dispatch(event)
        return event

    def rename_tool(self, tool_id: str, new_label: str) -> ToolRenamed:
        event = ToolRenamed(
            **self._base(), tool_id=tool_id, new_label=new_label
        )
        self.dispatch(event)
        return event

    def remove_tool(self, tool_id: str) -> ToolRemoved:
        event = ToolRemoved(**self._base(), tool_id=tool_id)
        self.dispatch(event)
        return event

    def set_tool_description(
        self, tool_id: str, description: str
    ) -> ToolDescriptionChanged:
        event = ToolDescriptionChanged(
            **self._base(), tool_id=tool_id, description=description
        )
        self.dispatch(event)
        return event

    def set_score(
        self,
        tool_id: str,
        criterion_id: str,
        score: float | None = None,
        *,
        label: str | None = None,
        comment: str | None = None,
    ) -> ScoreSet:
        """Rate one cell. ``score=None`` records a comment-only note."""
        event = ScoreSet(
            **self._base(),
            tool_id=tool_id,
            criterion_id=criterion_id,
            score=score,
            label=label,
            comment=comment,
        )
        self.dispatch(event)
        return event

    def add_rating(self, entry: ScoreEntry) -> ScoreSet:
        """Dispatch a pre-built rating, keeping its timestamp and author."""
        event = ScoreSet(
            id=ids.event_id(),
            timestamp=entry.timestamp,
            user=entry.user,
            tool_id=entry.tool_id,
            criterion_id=entry.criterion_id,
            score=entry.score,
            label=entry.label,
            comment=entry.comment,
        )
        self.dispatch(event)
        return event

    def set_weight(self, criterion_id: str, weight: float) -> WeightSet:
        event = WeightSet(
            **self._base(), criterion_id=criterion_id, weight=weight
        )
        self.dispatch(event)
        return event

    def set_matrix_default_scale(
        self, scale: ScaleType
    ) -> MatrixDefaultScaleSet:
        event = MatrixDefaultScaleSet(**self._base(), default_scale=scale)
        self.dispatch(event)
        return event

    def set_allow_negative(self, allow: bool) -> MatrixAllowNegativeSet:
        event = MatrixAllowNegativeSet(**self._base(), allow_negative=allow)
        self.dispatch(event)
        return event

    # ── Branches ─────────────────────────────────────────

    def _require_repository(self) -> MatrixRepository:
        if self._repository is None:
            raise PughRepoError("Session has no repository attached")
        return self._repository

    async def _refresh_branch_names(self) -> None:
        repo = self._require_repository()
        self._branch_names = await repo.list_branches()

    async def _load_branch(self, name: str) -> None:
        """Flush into the branch being left, then swap in ``name``.

        Runs under ``_flush_lock`` so a background flush never lands on
        the new branch's buffers. Edits dispatched during the checkout
        still belong to the old branch: they are flushed there and the
        checkout is repeated.
        """
        repo = self._require_repository()
        async with self._flush_lock:
            self._cancel_timer()
            self._is_loading = True
            try:
                while True:
                    await self._flush_locked()
                    events = await repo.checkout(name)
                    if not self._pending or not self._initialized:
                        break
                self._committed = events
                self._active_branch = name
                self._reproject()
            finally:
                self._is_loading = False

    async def switch_branch(self, name: str) -> None:
        """Flush, then make ``name`` the active branch.

        Raises ``ReferenceNotFoundError`` for an unknown branch and
        ``ImmutableRefError`` for a tag, which cannot take new commits.
        """
        repo = self._require_repository()
        ref = await repo.resolve(name)
        if ref.type == RefType.TAG:
            raise ImmutableRefError(name)
        await self._load_branch(name)
        logger.info("event=branch_switched branch=%s", name)

    async def create_branch(self, name: str) -> bool:
        """Fork the active branch as ``name`` and switch to it.

        Returns False if ``name`` is already taken.
        """
        repo = self._require_repository()
        if await repo.refs.get_ref(name) is not None:
            logger.warning("event=branch_exists branch=%s", name)
            return False
        await self.commit_pending()
        await repo.fork(name, self._active_branch)
        await self._load_branch(name)
        await self._refresh_branch_names()
        logger.info("event=branch_created branch=%s", name)
        return True

    async def rename_branch(self, old_name: str, new_name: str) -> bool:
        """Point ``new_name`` at ``old_name``'s tip and drop ``old_name``.

        The default branch cannot be renamed.
        """
        repo = self._require_repository()
        if old_name == self._default_branch:
            logger.warning(
                "event=rename_rejected branch=%s reason=default_branch",
                old_name,
            )
            return False
        if await repo.refs.get_ref(old_name) is None:
            return False
        if await repo.refs.get_ref(new_name) is not None:
            logger.warning("event=branch_exists branch=%s", new_name)
            return False

        async with self._flush_lock:
            if old_name == self._active_branch:
                await self._flush_locked()
            await repo.fork(new_name, old_name)
            await repo.delete_ref(old_name)
            if old_name == self._active_branch:
                self._active_branch = new_name
            await self._refresh_branch_names()
        logger.info(
            "event=branch_renamed old=%s new=%s", old_name, new_name
        )
        return True

    async def delete_branch(self, name: str) -> bool:
        """Drop a branch ref. Its commits stay in the object store.

        Deleting the active branch switches back to the default branch
        first. The default branch itself can never be deleted.
        """
        repo = self._require_repository()
        if name == self._default_branch:
            logger.warning(
                "event=delete_rejected branch=%s reason=default_branch",
                name,
            )
            return False
        if await repo.refs.get_ref(name) is None:
            return False

        if name == self._active_branch:
            await self.switch_branch(self._default_branch)
        await repo.delete_ref(name)
        await self._refresh_branch_names()
        logger.info("event=branch_deleted branch=%s", name)
        return True

    async def merge_branch(
        self,
        source: str,
        strategy: MergeStrategy | str = MergeStrategy.THEIRS,
        comment: str | None = None,
    ) -> Commit:
        """Merge ``source`` into the active branch and reload it."""
        repo = self._require_repository()
        await self.commit_pending()
        commit = await repo.merge(
            source, self._active_branch, strategy, self._author, comment
        )
        await self._load_branch(self._active_branch)
        return commit

    async def diff_branch(
        self, source: str, target: str | None = None
    ) -> BranchDiff:
        """Compare ``source`` with ``target`` (default: active branch)."""
        repo = self._require_repository()
        await self.commit_pending()
        return await repo.diff(source, target or self._active_branch)

    async def history(self, limit: int | None = None) -> list[Commit]:
        repo = self._require_repository()
        await self.commit_pending()
        return await repo.log(self._active_branch, limit)


def create_session(
    repository: MatrixRepository | None = None,
    *,
    criteria: Iterable[Criterion] = (),
    tools: Iterable[Tool] = (),
    ratings: Iterable[ScoreEntry] = (),
    weights: Mapping[str, float] | None = None,
    author: str | None = None,
    settings: Settings | None = None,
) -> MatrixSession:
    """Build a session whose seed data becomes the first commit on ``main``.

    The seed only matters for a fresh repository; an existing default
    branch is hydrated as-is by ``MatrixSession.init``.
    """
    settings = settings or Settings()
    seed = seed_events_from_options(
        criteria=criteria, options=tools, ratings=ratings, weights=weights
    )
    return MatrixSession(
        repository,
        seed_events=seed,
        author=author or settings.default_author,
        default_branch=settings.default_branch,
        debounce_seconds=settings.autocommit_debounce_seconds,
    )
