"""Two-parent merge commits under the ours / theirs / manual strategies."""

from __future__ import annotations

import logging

from pughrepo.constants import MERGE_COMMENT_TEMPLATE, MergeStrategy, RefType
from pughrepo.ids import commit_id, now_ms
from pughrepo.repositories.diff import require_ref
from pughrepo.repositories.protocols import ObjectStore, RefStore
from pughrepo.repositories.records import Commit, Ref
from pughrepo.repositories.walk import collect_event_ids
from pughrepo.resilience.errors import ImmutableRefError

logger = logging.getLogger(__name__)


async def merge_branches(
    objects: ObjectStore,
    refs: RefStore,
    source_branch: str,
    target_branch: str,
    strategy: MergeStrategy | str,
    author: str,
    comment: str | None = None,
) -> Commit:
    """Merge ``source_branch`` into ``target_branch``.

    - ``ours``: target kept as-is; the commit carries no events but records
      both parents, preserving the DAG shape and audit trail.
    - ``theirs``: source-only events are appended to target.
    - ``manual``: same mechanics as ``theirs``; conflicting edits must
      already have been resolved on the source branch.

    Source-only means "not already in target" by event id, not relative
    to the LCA. The source ref is left untouched.
    """
    strategy = MergeStrategy(strategy)
    source_ref = await require_ref(refs, source_branch)
    target_ref = await require_ref(refs, target_branch)
    if target_ref.type == RefType.TAG:
        raise ImmutableRefError(target_branch)

    target_ids = set(await collect_event_ids(target_ref.commit_id, objects))
    source_ids = await collect_event_ids(source_ref.commit_id, objects)
    source_only = [eid for eid in source_ids if eid not in target_ids]

    match strategy:
        case MergeStrategy.OURS:
            merge_event_ids: list[str] = []
        case MergeStrategy.THEIRS | MergeStrategy.MANUAL:
            merge_event_ids = source_only

    merge_commit = Commit(
        id=commit_id(),
        parent_ids=[target_ref.commit_id, source_ref.commit_id],
        event_ids=merge_event_ids,
        author=author,
        timestamp=now_ms(),
        comment=comment
        or MERGE_COMMENT_TEMPLATE.format(
            source=source_branch, target=target_branch
        ),
    )
    await objects.put_commit(merge_commit)
    await refs.put_ref(
        Ref(
            name=target_branch,
            commit_id=merge_commit.id,
            type=RefType.BRANCH,
        )
    )

    logger.info(
        "event=merge source=%s target=%s strategy=%s"
        " source_only=%d applied=%d commit=%s",
        source_branch,
        target_branch,
        strategy.value,
        len(source_only),
        len(merge_event_ids),
        merge_commit.id,
    )
    return merge_commit
