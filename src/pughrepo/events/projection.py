"""Projection: fold an ordered event log into DomainState.

Pure and deterministic: replaying the same prefix always yields the same
state. No event is ever rejected: renames, weights and scores that point at
missing ids are applied (or ignored) silently, because the fold's job is
total reconstruction, not validation.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from pughrepo.constants import DEFAULT_WEIGHT
from pughrepo.domain.state import Criterion, DomainState, ScoreEntry, Tool
from pughrepo.domain.values import DEFAULT_MATRIX_CONFIG, MatrixConfig
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
    ScoreSet,
    ToolAdded,
    ToolDescriptionChanged,
    ToolRemoved,
    ToolRenamed,
    WeightSet,
)

T = TypeVar("T", Criterion, Tool)


def _replace_first(
    items: list[T], item_id: str, **changes: object
) -> None:
    for i, item in enumerate(items):
        if item.id == item_id:
            items[i] = item.model_copy(update=changes)
            return


def project_events(events: Iterable[AnyEvent]) -> DomainState:
    """Materialize criteria, tools, scores, weights and config."""
    criteria: list[Criterion] = []
    tools: list[Tool] = []
    scores: list[ScoreEntry] = []
    weights: dict[str, float] = {}
    matrix_config: MatrixConfig = DEFAULT_MATRIX_CONFIG

    for event in events:
        match event:
            case MatrixCreated():
                matrix_config = MatrixConfig(
                    allow_negative=event.allow_negative,
                    default_scale=event.default_scale,
                )
            case MatrixDefaultScaleSet():
                matrix_config = matrix_config.model_copy(
                    update={"default_scale": event.default_scale}
                )
            case MatrixAllowNegativeSet():
                matrix_config = matrix_config.model_copy(
                    update={"allow_negative": event.allow_negative}
                )

            case CriterionAdded():
                criteria.append(
                    Criterion(
                        id=event.criterion_id,
                        label=event.label,
                        user=event.user,
                        scale=event.scale,
                    )
                )
                weights[event.criterion_id] = DEFAULT_WEIGHT
            case CriterionRenamed():
                _replace_first(
                    criteria, event.criterion_id, label=event.new_label
                )
            case CriterionScaleOverridden():
                _replace_first(
                    criteria, event.criterion_id, scale=event.scale
                )
            case CriterionDescriptionChanged():
                _replace_first(
                    criteria,
                    event.criterion_id,
                    description=event.description,
                )
            case CriterionRemoved():
                cid = event.criterion_id
                _remove_first(criteria, cid)
                weights.pop(cid, None)
                scores = [s for s in scores if s.criterion_id != cid]

            case ToolAdded():
                tools.append(
                    Tool(
                        id=event.tool_id,
                        label=event.label,
                        user=event.user,
                    )
                )
            case ToolRenamed():
                _replace_first(tools, event.tool_id, label=event.new_label)
            case ToolDescriptionChanged():
                _replace_first(
                    tools, event.tool_id, description=event.description
                )
            case ToolRemoved():
                tid = event.tool_id
                _remove_first(tools, tid)
                scores = [s for s in scores if s.tool_id != tid]

            case ScoreSet():
                # Always append: the cell keeps its full rating history.
                scores.append(
                    ScoreEntry(
                        id=event.id,
                        tool_id=event.tool_id,
                        criterion_id=event.criterion_id,
                        score=event.score,
                        label=event.label,
                        comment=event.comment,
                        timestamp=event.timestamp,
                        user=event.user,
                    )
                )
            case WeightSet():
                weights[event.criterion_id] = event.weight

    return DomainState(
        criteria=criteria,
        tools=tools,
        scores=scores,
        weights=weights,
        matrix_config=matrix_config,
    )


def _remove_first(
    items: list[T], item_id: str
) -> None:
    for i, item in enumerate(items):
        if item.id == item_id:
            del items[i]
            return
