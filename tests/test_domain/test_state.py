"""Tests for DomainState helpers and scale resolution."""

from __future__ import annotations

from pughrepo.domain.state import (
    Criterion,
    DomainState,
    ScoreEntry,
    get_effective_scale,
)
from pughrepo.domain.values import (
    DEFAULT_MATRIX_CONFIG,
    DEFAULT_SCALE,
    BinaryScale,
    MatrixConfig,
    NumericScale,
    UnboundedScale,
    scale_label,
)


def _entry(n: int, score: float | None, timestamp: int) -> ScoreEntry:
    return ScoreEntry(
        id=f"s{n}",
        tool_id="t1",
        criterion_id="c1",
        score=score,
        timestamp=timestamp,
        user="u",
    )


class TestCellHistory:
    def test_history_sorted_by_timestamp(self) -> None:
        state = DomainState(
            scores=[_entry(1, 5, 30), _entry(2, 6, 10), _entry(3, 7, 20)]
        )
        history = state.score_history("t1", "c1")
        assert [e.id for e in history] == ["s2", "s3", "s1"]

    def test_comment_only_entry_does_not_change_current(self) -> None:
        state = DomainState(scores=[_entry(1, 5, 10), _entry(2, None, 20)])
        current = state.current_score("t1", "c1")
        assert current is not None
        assert current.id == "s1"

    def test_empty_cell(self) -> None:
        assert DomainState().current_score("t1", "c1") is None


class TestLookups:
    def test_get_criterion_and_tool(self) -> None:
        c = Criterion(id="c1", label="Cost", user="u")
        state = DomainState(criteria=[c])
        assert state.get_criterion("c1") == c
        assert state.get_criterion("zz") is None
        assert state.get_tool("t1") is None


class TestScales:
    def test_effective_scale_falls_back_to_default(self) -> None:
        c = Criterion(id="c1", label="Cost", user="u")
        assert get_effective_scale(c, DEFAULT_MATRIX_CONFIG) == DEFAULT_SCALE

    def test_effective_scale_prefers_override(self) -> None:
        c = Criterion(id="c1", label="Ok?", user="u", scale=BinaryScale())
        config = MatrixConfig(default_scale=UnboundedScale())
        assert get_effective_scale(c, config) == BinaryScale()

    def test_scale_labels(self) -> None:
        assert scale_label(DEFAULT_SCALE) == "Numeric (1 to 10)"
        assert (
            scale_label(NumericScale(min=0, max=1, step=0.5))
            == "Numeric (0 to 1, step 0.5)"
        )
        assert scale_label(BinaryScale()) == "Binary (Yes/No)"
        assert scale_label(UnboundedScale()) == "Unbounded"

    def test_scales_compare_by_value(self) -> None:
        assert NumericScale(min=1, max=10) == NumericScale(min=1, max=10)
