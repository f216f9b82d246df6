"""Tests for Settings validators and engine construction."""

from __future__ import annotations

import logging

import pytest

from pughrepo.config import Settings, create_app_engine
from pughrepo.constants import StorageBackend


def _settings(**kwargs: object) -> Settings:
    return Settings(_env_file=None, **kwargs)  # type: ignore[arg-type]


class TestDefaults:
    def test_defaults(self) -> None:
        s = _settings()
        assert s.storage_backend == StorageBackend.MEMORY
        assert s.storage_prefix == "pugh"
        assert s.default_branch == "main"
        assert s.default_author == "system"
        assert s.autocommit_debounce_seconds == 0.3

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PUGHREPO_STORAGE_BACKEND", "sqlite")
        monkeypatch.setenv("PUGHREPO_DEFAULT_AUTHOR", "ci")
        s = _settings()
        assert s.storage_backend == StorageBackend.SQLITE
        assert s.default_author == "ci"


class TestStoragePrefix:
    def test_empty_prefix_raises(self) -> None:
        with pytest.raises(ValueError, match="must not be empty"):
            _settings(storage_prefix="")

    def test_separator_in_prefix_raises(self) -> None:
        with pytest.raises(ValueError, match="must not contain"):
            _settings(storage_prefix="a:b")


class TestDebounce:
    def test_negative_debounce_raises(self) -> None:
        with pytest.raises(ValueError, match=">= 0"):
            _settings(autocommit_debounce_seconds=-1)

    def test_zero_debounce_allowed(self) -> None:
        s = _settings(autocommit_debounce_seconds=0)
        assert s.autocommit_debounce_seconds == 0


class TestDefaultBranch:
    def test_whitespace_stripped_with_warning(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="pughrepo.config"):
            s = _settings(default_branch="  trunk ")
        assert s.default_branch == "trunk"
        assert "Stripped whitespace from DEFAULT_BRANCH" in caplog.text

    def test_blank_branch_raises(self) -> None:
        with pytest.raises(ValueError, match="must not be blank"):
            _settings(default_branch="   ")


class TestCreateAppEngine:
    async def test_sqlite_url_uses_aiosqlite(self) -> None:
        engine = create_app_engine("sqlite:///:memory:")
        try:
            assert engine.url.drivername == "sqlite+aiosqlite"
        finally:
            await engine.dispose()

    async def test_explicit_driver_untouched(self) -> None:
        engine = create_app_engine("sqlite+aiosqlite:///:memory:")
        try:
            assert engine.url.database == ":memory:"
        finally:
            await engine.dispose()
