"""Commit-DAG traversal over an id-keyed object store.

Commits reference parents by id only, so every walk is an explicit BFS
over ``ObjectStore.get_commit`` with a seen-set. Merge commits have two
parents; without the seen-set shared ancestors would be revisited once per
path.
"""

from __future__ import annotations

from collections import deque

from pughrepo.repositories.protocols import ObjectStore
from pughrepo.repositories.records import Commit


async def walk_commits(
    commit_id: str,
    objects: ObjectStore,
    limit: int | None = None,
) -> list[Commit]:
    """All commits reachable from ``commit_id``, newest first.

    The full ancestry is collected before sorting: parent order is
    insertion order, not time order, so BFS order cannot be trusted to be
    chronological. ``limit`` caps the sorted result.
    """
    seen: set[str] = set()
    commits: list[Commit] = []
    queue: deque[str] = deque([commit_id])

    while queue:
        cid = queue.popleft()
        if cid in seen:
            continue
        seen.add(cid)

        commit = await objects.get_commit(cid)
        if commit is None:
            continue
        commits.append(commit)
        queue.extend(p for p in commit.parent_ids if p not in seen)

    # Stable sort: equal timestamps keep BFS (tip-first) order
    commits.sort(key=lambda c: c.timestamp, reverse=True)
    if limit is not None:
        return commits[:limit]
    return commits


async def collect_ancestor_ids(
    commit_id: str, objects: ObjectStore
) -> set[str]:
    """Ids of ``commit_id`` and every commit reachable from it."""
    return {c.id for c in await walk_commits(commit_id, objects)}


async def first_parent_chain(
    commit_id: str, objects: ObjectStore
) -> list[Commit]:
    """The tip followed by its first parent, and so on back to the root."""
    chain: list[Commit] = []
    seen: set[str] = set()
    next_id: str | None = commit_id

    while next_id is not None and next_id not in seen:
        seen.add(next_id)
        commit = await objects.get_commit(next_id)
        if commit is None:
            break
        chain.append(commit)
        next_id = commit.parent_ids[0] if commit.parent_ids else None
    return chain


async def collect_event_ids(
    commit_id: str, objects: ObjectStore
) -> list[str]:
    """Deduplicated event ids in replay order for the history at ``commit_id``.

    Replay follows the branch's own (first-parent) line, oldest commit
    first. A merge commit is the only way the other side's events enter
    that line: it lists exactly the events its strategy brought over, so an
    ``ours`` merge adds nothing and ``theirs`` appends the source-only
    events after everything the target already had.
    """
    chain = await first_parent_chain(commit_id, objects)
    chain.reverse()

    seen: set[str] = set()
    event_ids: list[str] = []
    for commit in chain:
        for eid in commit.event_ids:
            if eid not in seen:
                seen.add(eid)
                event_ids.append(eid)
    return event_ids
