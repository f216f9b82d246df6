"""Materialized matrix entities and the projected DomainState snapshot."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pughrepo.domain.values import (
    DEFAULT_MATRIX_CONFIG,
    BinaryScale,
    MatrixConfig,
    NumericScale,
    ScaleType,
    UnboundedScale,
)


class Criterion(BaseModel):
    """A row of the matrix; falls back to the matrix default scale."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    user: str
    scale: ScaleType | None = None
    description: str | None = None


class Tool(BaseModel):
    """An option being evaluated (a column of the matrix)."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    user: str
    description: str | None = None


class ScoreEntry(BaseModel):
    """One rating event for a (tool, criterion) cell.

    ``score`` is None for comment-only entries, which annotate the cell
    history without changing its current value.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    tool_id: str
    criterion_id: str
    score: float | None = None
    label: str | None = None
    comment: str | None = None
    timestamp: int
    user: str


class DomainState(BaseModel):
    """Read-only snapshot produced by the projection."""

    model_config = ConfigDict(frozen=True)

    criteria: list[Criterion] = Field(
        default_factory=lambda: list[Criterion]()
    )
    tools: list[Tool] = Field(default_factory=lambda: list[Tool]())
    scores: list[ScoreEntry] = Field(
        default_factory=lambda: list[ScoreEntry]()
    )
    weights: dict[str, float] = Field(
        default_factory=lambda: dict[str, float]()
    )
    matrix_config: MatrixConfig = DEFAULT_MATRIX_CONFIG

    def get_criterion(self, criterion_id: str) -> Criterion | None:
        return next(
            (c for c in self.criteria if c.id == criterion_id), None
        )

    def get_tool(self, tool_id: str) -> Tool | None:
        return next((t for t in self.tools if t.id == tool_id), None)

    def score_history(
        self, tool_id: str, criterion_id: str
    ) -> list[ScoreEntry]:
        """All entries for a cell, oldest first (stable on ties)."""
        entries = [
            s
            for s in self.scores
            if s.tool_id == tool_id and s.criterion_id == criterion_id
        ]
        return sorted(entries, key=lambda s: s.timestamp)

    def current_score(
        self, tool_id: str, criterion_id: str
    ) -> ScoreEntry | None:
        """Most recent entry for a cell that carries a numeric score."""
        for entry in reversed(self.score_history(tool_id, criterion_id)):
            if entry.score is not None:
                return entry
        return None


def get_effective_scale(
    criterion: Criterion, matrix_config: MatrixConfig
) -> NumericScale | BinaryScale | UnboundedScale:
    """Criterion override if set, else the matrix default scale."""
    return criterion.scale or matrix_config.default_scale
