"""Object and ref stores laid out over any KeyValueStore.

Layout:
- ``<prefix>:obj:<id>``: one JSON blob per event or commit
- ``<prefix>:refs``: one JSON map of ref name → Ref

Object records carry no schema version; legacy event shapes are upgraded
on read by the event migration step. Unreadable records are logged and
treated as absent.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from pughrepo.constants import (
    DEFAULT_STORAGE_PREFIX,
    OBJECT_KEY_TEMPLATE,
    REFS_KEY_TEMPLATE,
)
from pughrepo.events.types import AnyEvent, dump_event, parse_event
from pughrepo.repositories.protocols import KeyValueStore
from pughrepo.repositories.records import Commit, Ref
from pughrepo.resilience.errors import classify_storage_error

logger = logging.getLogger(__name__)

_REF_TABLE = TypeAdapter(dict[str, Ref])


def _load_json(key: str, raw: str | None) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        _log_unreadable(key, exc)
        return None


def _log_unreadable(key: str, exc: BaseException) -> None:
    logger.warning(
        "event=unreadable_record key=%s class=%s",
        key,
        classify_storage_error(exc).value,
    )


class KeyValueObjectStore:
    """ObjectStore over a KeyValueStore."""

    def __init__(
        self,
        kv: KeyValueStore,
        prefix: str = DEFAULT_STORAGE_PREFIX,
    ) -> None:
        self._kv = kv
        self._prefix = prefix

    def _key(self, object_id: str) -> str:
        return OBJECT_KEY_TEMPLATE.format(prefix=self._prefix, id=object_id)

    async def _put_once(self, object_id: str, payload: Any) -> None:
        key = self._key(object_id)
        if await self._kv.get_item(key) is not None:
            return
        await self._kv.set_item(key, json.dumps(payload))

    async def get_event(self, event_id: str) -> AnyEvent | None:
        key = self._key(event_id)
        data = _load_json(key, await self._kv.get_item(key))
        if not isinstance(data, dict) or "type" not in data:
            return None
        try:
            return parse_event(data)  # pyright: ignore[reportUnknownArgumentType]
        except ValidationError as exc:
            _log_unreadable(key, exc)
            return None

    async def put_event(self, event: AnyEvent) -> None:
        await self._put_once(event.id, dump_event(event))

    async def get_commit(self, commit_id: str) -> Commit | None:
        key = self._key(commit_id)
        data = _load_json(key, await self._kv.get_item(key))
        if not isinstance(data, dict) or "parent_ids" not in data:
            return None
        try:
            return Commit.model_validate(data)
        except ValidationError as exc:
            _log_unreadable(key, exc)
            return None

    async def put_commit(self, commit: Commit) -> None:
        await self._put_once(
            commit.id, commit.model_dump(mode="json", exclude_none=True)
        )

    async def get_events(self, event_ids: list[str]) -> list[AnyEvent]:
        events: list[AnyEvent] = []
        for eid in event_ids:
            event = await self.get_event(eid)
            if event is not None:
                events.append(event)
        return events


class KeyValueRefStore:
    """RefStore keeping the whole ref table under a single key."""

    def __init__(
        self,
        kv: KeyValueStore,
        prefix: str = DEFAULT_STORAGE_PREFIX,
    ) -> None:
        self._kv = kv
        self._key = REFS_KEY_TEMPLATE.format(prefix=prefix)

    async def _load(self) -> dict[str, Ref]:
        data = _load_json(self._key, await self._kv.get_item(self._key))
        if data is None:
            return {}
        try:
            return _REF_TABLE.validate_python(data)
        except ValidationError as exc:
            _log_unreadable(self._key, exc)
            return {}

    async def _save(self, refs: dict[str, Ref]) -> None:
        await self._kv.set_item(
            self._key,
            _REF_TABLE.dump_json(refs).decode(),
        )

    async def get_ref(self, name: str) -> Ref | None:
        return (await self._load()).get(name)

    async def put_ref(self, ref: Ref) -> None:
        refs = await self._load()
        refs[ref.name] = ref
        await self._save(refs)

    async def delete_ref(self, name: str) -> None:
        refs = await self._load()
        if refs.pop(name, None) is not None:
            await self._save(refs)

    async def list_refs(self) -> list[Ref]:
        return list((await self._load()).values())
