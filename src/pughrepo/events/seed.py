"""Convert a flat initial dataset into an equivalent event sequence.

Construction-time seed data and history-derived data then share one code
path: the projection. Replaying the result reproduces the input, modulo
event ids and ordering.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from pughrepo.constants import DEFAULT_WEIGHT, SYSTEM_USER
from pughrepo.domain.state import Criterion, ScoreEntry, Tool
from pughrepo.events.types import (
    AnyEvent,
    CriterionAdded,
    CriterionDescriptionChanged,
    ScoreSet,
    ToolAdded,
    ToolDescriptionChanged,
    WeightSet,
)
from pughrepo.ids import event_id, now_ms


def seed_events_from_options(
    *,
    criteria: Iterable[Criterion] = (),
    options: Iterable[Tool] = (),
    ratings: Iterable[ScoreEntry] = (),
    weights: Mapping[str, float] | None = None,
) -> list[AnyEvent]:
    events: list[AnyEvent] = []
    now = now_ms()

    seeded_criteria: set[str] = set()
    for c in criteria:
        seeded_criteria.add(c.id)
        events.append(
            CriterionAdded(
                id=event_id(),
                timestamp=now,
                user=c.user,
                criterion_id=c.id,
                label=c.label,
                scale=c.scale,
            )
        )
        if c.description:
            events.append(
                CriterionDescriptionChanged(
                    id=event_id(),
                    timestamp=now,
                    user=c.user,
                    criterion_id=c.id,
                    description=c.description,
                )
            )

    # CriterionAdded already implies the default weight
    for cid, weight in (weights or {}).items():
        if weight != DEFAULT_WEIGHT or cid not in seeded_criteria:
            events.append(
                WeightSet(
                    id=event_id(),
                    timestamp=now,
                    user=SYSTEM_USER,
                    criterion_id=cid,
                    weight=weight,
                )
            )

    for t in options:
        events.append(
            ToolAdded(
                id=event_id(),
                timestamp=now,
                user=t.user,
                tool_id=t.id,
                label=t.label,
            )
        )
        if t.description:
            events.append(
                ToolDescriptionChanged(
                    id=event_id(),
                    timestamp=now,
                    user=t.user,
                    tool_id=t.id,
                    description=t.description,
                )
            )

    for r in ratings:
        events.append(
            ScoreSet(
                id=event_id(),
                timestamp=r.timestamp,
                user=r.user,
                tool_id=r.tool_id,
                criterion_id=r.criterion_id,
                score=r.score,
                label=r.label,
                comment=r.comment,
            )
        )

    return events
