"""
Entity Store

Named collections of records, read and written whole:
- InMemoryEntityStore: process-local (tests, ``memory`` backend)
- SQLiteEntityStore: .strategy/strategy.db (project root)

Every mutation made by the engines goes through ``EntityStore.modify``,
a compare-and-swap read-modify-write on the collection version token.
"""

from .base import ABSENT_VERSION, Collection, EntityStore, Record
from .database import SCHEMA_VERSION, SQLiteEntityStore, get_default_db_path
from .memory import InMemoryEntityStore
from .schema import COLLECTION_SCHEMA_VERSIONS, schema_version_for

__all__ = [
    "EntityStore",
    "InMemoryEntityStore",
    "SQLiteEntityStore",
    "get_default_db_path",
    "SCHEMA_VERSION",
    "ABSENT_VERSION",
    "COLLECTION_SCHEMA_VERSIONS",
    "schema_version_for",
    "Collection",
    "Record",
]
