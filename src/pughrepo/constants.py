"""Shared constants: single source of truth for cross-module values.

All magic strings and numbers that appear in 2+ files belong here.
StrEnum members are str-compatible, so downstream code (JSON records,
ref tables, log lines) works unchanged.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class RefType(StrEnum):
    """Kind of named pointer in the ref table."""

    BRANCH = "branch"
    TAG = "tag"


class MergeStrategy(StrEnum):
    """How source-only events are reconciled into the target branch."""

    OURS = "ours"
    THEIRS = "theirs"
    MANUAL = "manual"


class StorageBackend(StrEnum):
    """Repository backends selectable from Settings."""

    MEMORY = "memory"
    SQLITE = "sqlite"


# ── Domain Defaults ──────────────────────────────────────

DEFAULT_WEIGHT = 10
MAIN_BRANCH = "main"
SYSTEM_USER = "system"

# ── ID Generation ───────────────────────────────────────

EVENT_ID_PREFIX = "evt"
COMMIT_ID_PREFIX = "commit"
CRITERION_ID_PREFIX = "cri"
TOOL_ID_PREFIX = "tool"
ID_HEX_LENGTH = 32

# ── Key-Value Layout ────────────────────────────────────

DEFAULT_STORAGE_PREFIX = "pugh"
OBJECT_KEY_TEMPLATE = "{prefix}:obj:{id}"
REFS_KEY_TEMPLATE = "{prefix}:refs"
KEY_SEPARATOR = ":"

# ── Commit Messages ─────────────────────────────────────

INITIAL_COMMIT_COMMENT = "Initial commit"
MERGE_COMMENT_TEMPLATE = "Merge '{source}' into '{target}'"

# ── Session ─────────────────────────────────────────────

AUTOCOMMIT_DEBOUNCE_SECONDS = 0.3
