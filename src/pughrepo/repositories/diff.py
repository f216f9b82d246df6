"""Branch diff relative to the lowest common ancestor."""

from __future__ import annotations

from pughrepo.events.projection import project_events
from pughrepo.events.types import AnyEvent
from pughrepo.repositories.protocols import ObjectStore, RefStore
from pughrepo.repositories.records import BranchDiff, Ref
from pughrepo.repositories.walk import (
    collect_ancestor_ids,
    collect_event_ids,
    walk_commits,
)
from pughrepo.resilience.errors import ReferenceNotFoundError


async def find_lca(
    commit_id_a: str,
    commit_id_b: str,
    objects: ObjectStore,
) -> str | None:
    """Lowest common ancestor of two tips, or None for disjoint histories.

    B's ancestry is scanned newest first; the first commit already in A's
    ancestor set is the LCA.
    """
    ancestors_a = await collect_ancestor_ids(commit_id_a, objects)
    for commit in await walk_commits(commit_id_b, objects):
        if commit.id in ancestors_a:
            return commit.id
    return None


async def _events_after(
    tip_commit_id: str,
    ancestor_id: str | None,
    objects: ObjectStore,
) -> list[AnyEvent]:
    event_ids = await collect_event_ids(tip_commit_id, objects)
    if ancestor_id is not None:
        known = set(await collect_event_ids(ancestor_id, objects))
        event_ids = [eid for eid in event_ids if eid not in known]
    return await objects.get_events(event_ids)


async def require_ref(refs: RefStore, name: str) -> Ref:
    ref = await refs.get_ref(name)
    if ref is None:
        raise ReferenceNotFoundError(name)
    return ref


async def diff_branches(
    objects: ObjectStore,
    refs: RefStore,
    source_branch: str,
    target_branch: str,
) -> BranchDiff:
    source_ref = await require_ref(refs, source_branch)
    target_ref = await require_ref(refs, target_branch)

    lca = await find_lca(
        source_ref.commit_id, target_ref.commit_id, objects
    )
    source_events = await _events_after(source_ref.commit_id, lca, objects)
    target_events = await _events_after(target_ref.commit_id, lca, objects)

    # Full projections so callers can render either the delta or the result
    all_source = await objects.get_events(
        await collect_event_ids(source_ref.commit_id, objects)
    )
    all_target = await objects.get_events(
        await collect_event_ids(target_ref.commit_id, objects)
    )

    return BranchDiff(
        common_ancestor_id=lca,
        source_branch=source_branch,
        target_branch=target_branch,
        source_events=source_events,
        target_events=target_events,
        source_state=project_events(all_source),
        target_state=project_events(all_target),
    )
