"""Repository errors and storage-failure classification.

Ref lookups that fail are surfaced to the caller as exceptions. Storage
failures in the durable backend are classified, logged and swallowed: the
local store is a best-effort cache, not a system of record.

Classification feeds structured logging, separating environmental failures
from data problems.
"""

from __future__ import annotations

import json
import sqlite3
from enum import Enum

from pydantic import ValidationError
from sqlalchemy.exc import DBAPIError, OperationalError


class PughRepoError(Exception):
    """Base class for errors raised by the repository layer."""


class ReferenceNotFoundError(PughRepoError, LookupError):
    """A branch or tag name has no ref."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Branch '{name}' does not exist")
        self.name = name


class ImmutableRefError(PughRepoError):
    """Attempted to advance a tag as if it were a branch."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Ref '{name}' is a tag and cannot be committed to")
        self.name = name


class StorageErrorClass(Enum):
    QUOTA = "quota"  # disk full, database too large
    SERIALIZATION = "serialization"  # corrupt or unparseable record
    UNAVAILABLE = "unavailable"  # locked, missing file, closed engine
    UNKNOWN = "unknown"


def classify_storage_error(error: BaseException) -> StorageErrorClass:
    """Classify a storage-layer failure.

    Checks structured exception types first, falls back to string
    matching on the driver message.
    """
    # 1. Record-level problems
    if isinstance(
        error, (json.JSONDecodeError, ValidationError, TypeError)
    ):
        return StorageErrorClass.SERIALIZATION

    # 2. Unwrap the DBAPI exception SQLAlchemy wraps
    orig = error.orig if isinstance(error, DBAPIError) else error
    msg = str(orig).lower()

    if isinstance(orig, sqlite3.DataError) or "too big" in msg:
        return StorageErrorClass.QUOTA
    if "disk is full" in msg or "quota" in msg or "no space" in msg:
        return StorageErrorClass.QUOTA

    if isinstance(error, OperationalError) or isinstance(
        orig, sqlite3.OperationalError
    ):
        return StorageErrorClass.UNAVAILABLE
    if "locked" in msg or "unable to open" in msg:
        return StorageErrorClass.UNAVAILABLE

    return StorageErrorClass.UNKNOWN
