"""SQLAlchemy ORM models."""

from pughrepo.models.base import Base
from pughrepo.models.kv_entry import KeyValueEntry

__all__ = [
    "Base",
    "KeyValueEntry",
]
