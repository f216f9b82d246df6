"""Event vocabulary, projection and seeding."""

from pughrepo.events.migration import migrate_event
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
    MatrixCreated,
    MatrixDefaultScaleSet,
    PughEvent,
    ScoreSet,
    ToolAdded,
    ToolDescriptionChanged,
    ToolRemoved,
    ToolRenamed,
    WeightSet,
    dump_event,
    parse_event,
)

__all__ = [
    "AnyEvent",
    "CriterionAdded",
    "CriterionDescriptionChanged",
    "CriterionRemoved",
    "CriterionRenamed",
    "CriterionScaleOverridden",
    "MatrixAllowNegativeSet",
    "MatrixCreated",
    "MatrixDefaultScaleSet",
    "PughEvent",
    "ScoreSet",
    "ToolAdded",
    "ToolDescriptionChanged",
    "ToolRemoved",
    "ToolRenamed",
    "WeightSet",
    "dump_event",
    "migrate_event",
    "parse_event",
    "project_events",
    "seed_events_from_options",
]
