"""Backend-agnostic repository managing a matrix's commit history."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncEngine

from pughrepo.constants import MergeStrategy, RefType
from pughrepo.events.types import AnyEvent
from pughrepo.ids import commit_id, now_ms
from pughrepo.repositories.diff import diff_branches, require_ref
from pughrepo.repositories.merge import merge_branches
from pughrepo.repositories.protocols import ObjectStore, RefStore
from pughrepo.repositories.records import BranchDiff, Commit, Ref
from pughrepo.repositories.walk import collect_event_ids, walk_commits
from pughrepo.resilience.errors import ImmutableRefError

logger = logging.getLogger(__name__)


class MatrixRepository:
    """Commit, checkout, log, fork, diff and merge over a commit DAG.

    Stores are injected at construction. No locking is done here: callers
    must serialise writes to the same branch name, otherwise the last ref
    update wins.

    ``engine`` is set only when the repository owns the database engine
    behind its stores; ``aclose`` disposes it.
    """

    def __init__(
        self,
        objects: ObjectStore,
        refs: RefStore,
        *,
        engine: AsyncEngine | None = None,
    ) -> None:
        self.objects = objects
        self.refs = refs
        self._engine = engine

    async def aclose(self) -> None:
        """Dispose an owned engine. Safe to call more than once."""
        if self._engine is None:
            return
        engine, self._engine = self._engine, None
        await engine.dispose()
        logger.info("event=repository_closed")

    async def commit(
        self,
        branch: str,
        events: Sequence[AnyEvent],
        author: str,
        comment: str | None = None,
    ) -> Commit:
        """Store ``events`` and advance ``branch`` to a new commit.

        Events are written before the commit that references them. A new
        branch name produces a root commit.
        """
        ref = await self.refs.get_ref(branch)
        if ref is not None and ref.type == RefType.TAG:
            raise ImmutableRefError(branch)

        for event in events:
            await self.objects.put_event(event)

        commit = Commit(
            id=commit_id(),
            parent_ids=[ref.commit_id] if ref is not None else [],
            event_ids=[e.id for e in events],
            author=author,
            timestamp=now_ms(),
            comment=comment,
        )
        await self.objects.put_commit(commit)
        await self.refs.put_ref(
            Ref(name=branch, commit_id=commit.id, type=RefType.BRANCH)
        )
        logger.debug(
            "event=commit branch=%s commit=%s events=%d",
            branch,
            commit.id,
            len(commit.event_ids),
        )
        return commit

    async def checkout(self, branch: str) -> list[AnyEvent]:
        """Ordered events for ``branch``, ready for projection."""
        ref = await self.refs.get_ref(branch)
        if ref is None:
            return []
        event_ids = await collect_event_ids(ref.commit_id, self.objects)
        return await self.objects.get_events(event_ids)

    async def log(
        self, branch: str, limit: int | None = None
    ) -> list[Commit]:
        """Commits reachable from the branch tip, newest first."""
        ref = await self.refs.get_ref(branch)
        if ref is None:
            return []
        return await walk_commits(ref.commit_id, self.objects, limit)

    async def fork(self, new_branch: str, source_branch: str) -> Ref:
        """Point ``new_branch`` at the source tip. No events are copied."""
        source_ref = await require_ref(self.refs, source_branch)
        new_ref = Ref(
            name=new_branch,
            commit_id=source_ref.commit_id,
            type=RefType.BRANCH,
        )
        await self.refs.put_ref(new_ref)
        logger.debug(
            "event=fork branch=%s source=%s commit=%s",
            new_branch,
            source_branch,
            new_ref.commit_id,
        )
        return new_ref

    async def tag(self, tag_name: str, branch: str) -> Ref:
        """Pin the current tip of ``branch`` under an immutable name."""
        source_ref = await require_ref(self.refs, branch)
        tag_ref = Ref(
            name=tag_name,
            commit_id=source_ref.commit_id,
            type=RefType.TAG,
        )
        await self.refs.put_ref(tag_ref)
        return tag_ref

    async def resolve(self, name: str) -> Ref:
        return await require_ref(self.refs, name)

    async def list_branches(self) -> list[str]:
        return sorted(
            r.name
            for r in await self.refs.list_refs()
            if r.type == RefType.BRANCH
        )

    async def delete_ref(self, name: str) -> None:
        """Drop a ref. Commits stay in the object store."""
        await self.refs.delete_ref(name)

    async def diff(
        self, source_branch: str, target_branch: str
    ) -> BranchDiff:
        return await diff_branches(
            self.objects, self.refs, source_branch, target_branch
        )

    async def merge(
        self,
        source_branch: str,
        target_branch: str,
        strategy: MergeStrategy | str,
        author: str,
        comment: str | None = None,
    ) -> Commit:
        return await merge_branches(
            self.objects,
            self.refs,
            source_branch,
            target_branch,
            strategy,
            author,
            comment,
        )
