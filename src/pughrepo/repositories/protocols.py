"""Protocol-based storage interfaces.

Backends satisfy these protocols structurally (no inheritance) and are
selected by injection when the repository is constructed. Test doubles can
be plain classes or mocks matching the same signature.
"""

from typing import Protocol

from pughrepo.events.types import AnyEvent
from pughrepo.repositories.records import Commit, Ref


class ObjectStore(Protocol):
    """Content-addressed store for events and commits, keyed by their id."""

    async def get_event(self, event_id: str) -> AnyEvent | None: ...
    async def put_event(self, event: AnyEvent) -> None: ...
    async def get_commit(self, commit_id: str) -> Commit | None: ...
    async def put_commit(self, commit: Commit) -> None: ...
    async def get_events(self, event_ids: list[str]) -> list[AnyEvent]: ...


class RefStore(Protocol):
    """Mutable name → Ref table."""

    async def get_ref(self, name: str) -> Ref | None: ...
    async def put_ref(self, ref: Ref) -> None: ...
    async def delete_ref(self, name: str) -> None: ...
    async def list_refs(self) -> list[Ref]: ...


class KeyValueStore(Protocol):
    """String key → string value storage behind the keyed stores."""

    async def get_item(self, key: str) -> str | None: ...
    async def set_item(self, key: str, value: str) -> None: ...
    async def remove_item(self, key: str) -> None: ...
