"""Event vocabulary: immutable facts about a matrix.

Each event is a frozen pydantic model discriminated by ``type``. Events
carry no behaviour; the projection gives them meaning. Referenced ids are
plain strings and are never cross-checked against other entities.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from pughrepo.domain.values import ScaleType
from pughrepo.events.migration import migrate_event


class _EventBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: int
    user: str


# ── Matrix configuration ─────────────────────────────────


class MatrixCreated(_EventBase):
    type: Literal["MatrixCreated"] = "MatrixCreated"
    title: str
    description: str | None = None
    allow_negative: bool
    default_scale: ScaleType


class MatrixDefaultScaleSet(_EventBase):
    type: Literal["MatrixDefaultScaleSet"] = "MatrixDefaultScaleSet"
    default_scale: ScaleType


class MatrixAllowNegativeSet(_EventBase):
    type: Literal["MatrixAllowNegativeSet"] = "MatrixAllowNegativeSet"
    allow_negative: bool


# ── Criteria ─────────────────────────────────────────────


class CriterionAdded(_EventBase):
    type: Literal["CriterionAdded"] = "CriterionAdded"
    criterion_id: str
    label: str
    scale: ScaleType | None = None


class CriterionRenamed(_EventBase):
    type: Literal["CriterionRenamed"] = "CriterionRenamed"
    criterion_id: str
    new_label: str


class CriterionRemoved(_EventBase):
    """Tombstone: the criterion and everything scored against it vanish."""

    type: Literal["CriterionRemoved"] = "CriterionRemoved"
    criterion_id: str


class CriterionScaleOverridden(_EventBase):
    type: Literal["CriterionScaleOverridden"] = "CriterionScaleOverridden"
    criterion_id: str
    scale: ScaleType


class CriterionDescriptionChanged(_EventBase):
    type: Literal["CriterionDescriptionChanged"] = (
        "CriterionDescriptionChanged"
    )
    criterion_id: str
    description: str


# ── Tools (options) ──────────────────────────────────────


class ToolAdded(_EventBase):
    type: Literal["ToolAdded"] = "ToolAdded"
    tool_id: str
    label: str


class ToolRenamed(_EventBase):
    type: Literal["ToolRenamed"] = "ToolRenamed"
    tool_id: str
    new_label: str


class ToolRemoved(_EventBase):
    """Tombstone: the tool and every score referencing it vanish."""

    type: Literal["ToolRemoved"] = "ToolRemoved"
    tool_id: str


class ToolDescriptionChanged(_EventBase):
    type: Literal["ToolDescriptionChanged"] = "ToolDescriptionChanged"
    tool_id: str
    description: str


# ── Ratings and weights ──────────────────────────────────


class ScoreSet(_EventBase):
    """A rating for one cell. Without ``score`` it is a comment-only note."""

    type: Literal["ScoreSet"] = "ScoreSet"
    tool_id: str
    criterion_id: str
    score: float | None = None
    label: str | None = None  # overrides the scale label for this value
    comment: str | None = None


class WeightSet(_EventBase):
    type: Literal["WeightSet"] = "WeightSet"
    criterion_id: str
    weight: float


AnyEvent = (
    MatrixCreated
    | MatrixDefaultScaleSet
    | MatrixAllowNegativeSet
    | CriterionAdded
    | CriterionRenamed
    | CriterionRemoved
    | CriterionScaleOverridden
    | CriterionDescriptionChanged
    | ToolAdded
    | ToolRenamed
    | ToolRemoved
    | ToolDescriptionChanged
    | ScoreSet
    | WeightSet
)

PughEvent = Annotated[AnyEvent, Field(discriminator="type")]

_EVENT_ADAPTER: TypeAdapter[AnyEvent] = TypeAdapter(PughEvent)


def parse_event(raw: dict[str, Any]) -> AnyEvent:
    """Validate a stored record, upgrading legacy shapes first."""
    return _EVENT_ADAPTER.validate_python(migrate_event(raw))


def dump_event(event: AnyEvent) -> dict[str, Any]:
    """JSON-compatible dict for persistence."""
    return event.model_dump(mode="json", exclude_none=True)
