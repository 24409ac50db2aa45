"""
In-memory entity store.

Used by tests and by the ``memory`` backend. Records are deep-copied in and
out so callers can never mutate stored state by aliasing.
"""

import copy
import threading

from ..errors import ConcurrentModificationError
from .base import ABSENT_VERSION, Collection, EntityStore
from .schema import schema_version_for


class InMemoryEntityStore(EntityStore):
    """Process-local store guarded by a lock."""

    def __init__(self, initial: dict[str, Collection] | None = None):
        self._lock = threading.Lock()
        self._collections: dict[str, tuple[Collection, int, int]] = {}
        for name, items in (initial or {}).items():
            self._write(name, items, None)

    def _read(self, name: str) -> tuple[Collection | None, int, int | None]:
        with self._lock:
            entry = self._collections.get(name)
            if entry is None:
                return None, ABSENT_VERSION, None
            items, version, schema = entry
            return copy.deepcopy(items), version, schema

    def _write(
        self, name: str, items: Collection, expected_version: int | None
    ) -> int:
        with self._lock:
            entry = self._collections.get(name)
            current = entry[1] if entry else ABSENT_VERSION
            if expected_version is not None and current != expected_version:
                raise ConcurrentModificationError(
                    f"Collection '{name}' changed (version {current}, "
                    f"expected {expected_version})",
                    collection=name,
                    version=current,
                    expected=expected_version,
                )
            new_version = current + 1
            self._collections[name] = (
                copy.deepcopy(items),
                new_version,
                schema_version_for(name),
            )
            return new_version

    def collections(self) -> list[str]:
        with self._lock:
            return sorted(self._collections)

    def put_raw(self, name: str, items: Collection, schema_version: int) -> None:
        """Store a collection with an arbitrary schema version (migration tests)."""
        with self._lock:
            entry = self._collections.get(name)
            version = (entry[1] if entry else ABSENT_VERSION) + 1
            self._collections[name] = (copy.deepcopy(items), version, schema_version)
