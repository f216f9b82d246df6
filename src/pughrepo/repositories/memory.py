"""In-memory stores for tests and ephemeral sessions.

Dict-backed implementations of the storage protocols.
No SQLAlchemy, no I/O, instant operations.
"""

from __future__ import annotations

from pughrepo.events.types import AnyEvent
from pughrepo.repositories.records import Commit, Ref


class MemoryObjectStore:
    """Dict-backed ObjectStore."""

    def __init__(self) -> None:
        self._events: dict[str, AnyEvent] = {}
        self._commits: dict[str, Commit] = {}

    async def get_event(self, event_id: str) -> AnyEvent | None:
        return self._events.get(event_id)

    async def put_event(self, event: AnyEvent) -> None:
        # Objects are immutable: a second write of the same id is a no-op
        self._events.setdefault(event.id, event)

    async def get_commit(self, commit_id: str) -> Commit | None:
        return self._commits.get(commit_id)

    async def put_commit(self, commit: Commit) -> None:
        self._commits.setdefault(commit.id, commit)

    async def get_events(self, event_ids: list[str]) -> list[AnyEvent]:
        """Resolve ids in order, skipping unknown ones."""
        return [
            self._events[eid]
            for eid in event_ids
            if eid in self._events
        ]

    @property
    def event_count(self) -> int:
        return len(self._events)

    @property
    def commit_count(self) -> int:
        return len(self._commits)


class MemoryRefStore:
    """Dict-backed RefStore."""

    def __init__(self) -> None:
        self._refs: dict[str, Ref] = {}

    async def get_ref(self, name: str) -> Ref | None:
        return self._refs.get(name)

    async def put_ref(self, ref: Ref) -> None:
        self._refs[ref.name] = ref

    async def delete_ref(self, name: str) -> None:
        self._refs.pop(name, None)

    async def list_refs(self) -> list[Ref]:
        return list(self._refs.values())


class MemoryKeyValueStore:
    """Dict-backed KeyValueStore, for exercising the keyed layout."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    async def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)
