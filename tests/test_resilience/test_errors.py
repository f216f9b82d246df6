"""Tests for the error hierarchy and storage-failure classification."""

from __future__ import annotations

import json
import sqlite3

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError

from pughrepo.resilience.errors import (
    ImmutableRefError,
    PughRepoError,
    ReferenceNotFoundError,
    StorageErrorClass,
    classify_storage_error,
)


class _Strict(BaseModel):
    n: int


def _validation_error() -> ValidationError:
    try:
        _Strict.model_validate({"n": "not a number"})
    except ValidationError as exc:
        return exc
    raise AssertionError("expected ValidationError")


# ── Hierarchy ────────────────────────────────────────────────


def test_reference_not_found_is_lookup_error() -> None:
    err = ReferenceNotFoundError("feature")
    assert isinstance(err, PughRepoError)
    assert isinstance(err, LookupError)
    assert err.name == "feature"
    assert str(err) == "Branch 'feature' does not exist"


def test_immutable_ref_error() -> None:
    err = ImmutableRefError("v1")
    assert isinstance(err, PughRepoError)
    assert "v1" in str(err)


# ── classify_storage_error ───────────────────────────────────


def test_json_decode_is_serialization() -> None:
    err = json.JSONDecodeError("Expecting value", "{broken", 1)
    assert classify_storage_error(err) == StorageErrorClass.SERIALIZATION


def test_validation_error_is_serialization() -> None:
    assert (
        classify_storage_error(_validation_error())
        == StorageErrorClass.SERIALIZATION
    )


def test_operational_error_is_unavailable() -> None:
    err = OperationalError(
        "SELECT 1", {}, sqlite3.OperationalError("database is locked")
    )
    assert classify_storage_error(err) == StorageErrorClass.UNAVAILABLE


def test_disk_full_is_quota() -> None:
    err = OperationalError(
        "INSERT", {}, sqlite3.OperationalError("database or disk is full")
    )
    assert classify_storage_error(err) == StorageErrorClass.QUOTA


def test_string_too_big_is_quota() -> None:
    err = sqlite3.DataError("string or blob too big")
    assert classify_storage_error(err) == StorageErrorClass.QUOTA


def test_integrity_error_is_unknown() -> None:
    err = IntegrityError(
        "INSERT", {}, sqlite3.IntegrityError("UNIQUE constraint failed")
    )
    assert classify_storage_error(err) == StorageErrorClass.UNKNOWN


def test_message_fallback_unable_to_open() -> None:
    err = RuntimeError("unable to open database file")
    assert classify_storage_error(err) == StorageErrorClass.UNAVAILABLE
