"""Commit/branch repository over pluggable object and ref stores."""

from pughrepo.repositories.diff import diff_branches, find_lca
from pughrepo.repositories.factory import (
    create_keyed_repository,
    create_memory_repository,
    create_repository,
    create_sql_repository,
)
from pughrepo.repositories.keyed import KeyValueObjectStore, KeyValueRefStore
from pughrepo.repositories.kv_store import SqlKeyValueStore
from pughrepo.repositories.matrix_repo import MatrixRepository
from pughrepo.repositories.memory import (
    MemoryKeyValueStore,
    MemoryObjectStore,
    MemoryRefStore,
)
from pughrepo.repositories.merge import merge_branches
from pughrepo.repositories.protocols import (
    KeyValueStore,
    ObjectStore,
    RefStore,
)
from pughrepo.repositories.records import BranchDiff, Commit, Ref
from pughrepo.repositories.walk import collect_event_ids, walk_commits

__all__ = [
    "BranchDiff",
    "Commit",
    "KeyValueObjectStore",
    "KeyValueRefStore",
    "KeyValueStore",
    "MatrixRepository",
    "MemoryKeyValueStore",
    "MemoryObjectStore",
    "MemoryRefStore",
    "ObjectStore",
    "Ref",
    "RefStore",
    "SqlKeyValueStore",
    "collect_event_ids",
    "create_keyed_repository",
    "create_memory_repository",
    "create_repository",
    "create_sql_repository",
    "diff_branches",
    "find_lca",
    "merge_branches",
    "walk_commits",
]
