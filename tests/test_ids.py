"""Tests for id generators and the writer clock."""

from __future__ import annotations

from pughrepo.constants import ID_HEX_LENGTH
from pughrepo.ids import commit_id, criterion_id, event_id, now_ms, tool_id


def test_prefixes() -> None:
    assert event_id().startswith("evt_")
    assert commit_id().startswith("commit_")
    assert criterion_id().startswith("cri_")
    assert tool_id().startswith("tool_")


def test_ids_are_unique_and_sized() -> None:
    ids = {event_id() for _ in range(500)}
    assert len(ids) == 500
    assert all(len(i) == len("evt_") + ID_HEX_LENGTH for i in ids)


def test_clock_strictly_increases() -> None:
    stamps = [now_ms() for _ in range(1_000)]
    assert all(b > a for a, b in zip(stamps, stamps[1:], strict=False))
