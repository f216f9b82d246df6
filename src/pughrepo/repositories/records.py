"""Commit-graph records: commits, refs and branch diffs."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pughrepo.constants import RefType
from pughrepo.domain.state import DomainState
from pughrepo.events.types import PughEvent


class Commit(BaseModel):
    """Immutable bundle of event ids with 0 (root), 1 or 2 (merge) parents."""

    model_config = ConfigDict(frozen=True)

    id: str
    parent_ids: list[str] = Field(default_factory=lambda: list[str]())
    event_ids: list[str] = Field(default_factory=lambda: list[str]())
    author: str
    timestamp: int
    comment: str | None = None

    @property
    def is_merge(self) -> bool:
        return len(self.parent_ids) > 1


class Ref(BaseModel):
    """Named pointer to a commit. Branches move; tags do not."""

    model_config = ConfigDict(frozen=True)

    name: str
    commit_id: str
    type: RefType = RefType.BRANCH


class BranchDiff(BaseModel):
    """Events unique to each side since the LCA, plus full projections."""

    model_config = ConfigDict(frozen=True)

    common_ancestor_id: str | None
    source_branch: str
    target_branch: str
    source_events: list[PughEvent]
    target_events: list[PughEvent]
    source_state: DomainState
    target_state: DomainState
