"""Single migration step for legacy event records.

Early history was written with "option" / "rating" naming and a per-event
``branch_id``. Records are upgraded in-flight when read; stored objects are
never rewritten. Records already in the current vocabulary pass through
unchanged, so the step is idempotent.
"""

from __future__ import annotations

from typing import Any

# legacy type → (current type, {legacy field: current field})
_RENAMED_TYPES: dict[str, tuple[str, dict[str, str]]] = {
    "OptionAdded": ("ToolAdded", {"option_id": "tool_id"}),
    "OptionRenamed": ("ToolRenamed", {"option_id": "tool_id"}),
    "OptionRemoved": ("ToolRemoved", {"option_id": "tool_id"}),
    "OptionDescriptionChanged": (
        "ToolDescriptionChanged",
        {"option_id": "tool_id"},
    ),
    "RatingAssigned": (
        "ScoreSet",
        {"option_id": "tool_id", "value": "score"},
    ),
    "CriterionWeightAdjusted": ("WeightSet", {}),
}

_DROPPED_FIELDS = frozenset({"branch_id"})


def is_legacy(raw: dict[str, Any]) -> bool:
    return raw.get("type") in _RENAMED_TYPES or any(
        f in raw for f in _DROPPED_FIELDS
    )


def migrate_event(raw: dict[str, Any]) -> dict[str, Any]:
    """Return ``raw`` in the current vocabulary (a new dict if changed)."""
    if not is_legacy(raw):
        return raw

    migrated = {
        k: v for k, v in raw.items() if k not in _DROPPED_FIELDS
    }
    renamed = _RENAMED_TYPES.get(str(migrated.get("type")))
    if renamed is None:
        return migrated

    new_type, field_map = renamed
    migrated["type"] = new_type
    for old, new in field_map.items():
        if old in migrated:
            migrated[new] = migrated.pop(old)
    return migrated
