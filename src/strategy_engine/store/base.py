"""
Entity store interface.

Named collections of JSON-compatible records. ``get``/``set`` reproduce the
plain key-value boundary (last write wins for the whole collection). The
versioned operations add compare-and-swap so a read-modify-write either
lands on the snapshot it read or fails with ConcurrentModificationError.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from ..errors import ConcurrentModificationError, SchemaVersionError
from .schema import schema_version_for

logger = logging.getLogger(__name__)

Record = dict[str, Any]
Collection = list[Record]

# Version token of a collection that has never been written.
ABSENT_VERSION = 0


class EntityStore(ABC):
    """Repository of named collections with a version token per collection."""

    @abstractmethod
    def _read(self, name: str) -> tuple[Collection | None, int, int | None]:
        """Return (items, version, stored schema version) for a collection."""

    @abstractmethod
    def _write(
        self, name: str, items: Collection, expected_version: int | None
    ) -> int:
        """
        Write a collection and return its new version.

        When ``expected_version`` is not None the write must only happen if
        the stored version still equals it; otherwise raise
        ConcurrentModificationError.
        """

    @abstractmethod
    def collections(self) -> list[str]:
        """Names of all stored collections."""

    # =========================================================================
    # Key-value boundary
    # =========================================================================

    def get(self, name: str) -> Collection | None:
        """Get a collection, or None if it was never written."""
        items, _ = self.get_versioned(name)
        return items

    def set(
        self,
        name: str,
        value: Collection | Callable[[Collection | None], Collection],
    ) -> None:
        """Replace a collection (last write wins)."""
        if callable(value):
            value = value(self.get(name))
        self._write(name, list(value), None)

    # =========================================================================
    # Versioned boundary
    # =========================================================================

    def get_versioned(self, name: str) -> tuple[Collection | None, int]:
        """Get a collection together with its version token."""
        items, version, stored_schema = self._read(name)
        supported = schema_version_for(name)
        if stored_schema is not None and stored_schema > supported:
            raise SchemaVersionError(
                f"Collection '{name}' has schema version {stored_schema}; "
                f"this release supports up to {supported}",
                collection=name,
                stored=stored_schema,
                supported=supported,
            )
        return items, version

    def compare_and_set(
        self, name: str, items: Collection, expected_version: int
    ) -> int:
        """Write ``items`` only if the collection is still at ``expected_version``."""
        try:
            return self._write(name, list(items), expected_version)
        except ConcurrentModificationError:
            logger.warning(
                f"Concurrent write rejected for '{name}' "
                f"(expected version {expected_version})"
            )
            raise

    def modify(
        self,
        name: str,
        operation: Callable[[Collection], tuple[Collection | None, Any]],
        default: Collection | None = None,
    ) -> Any:
        """
        Read-modify-write a collection atomically.

        Args:
            name: Collection name
            operation: Called with the current items (or ``default``); returns
                ``(new_items, result)``. ``new_items`` of None means nothing
                changed and no write is made.
            default: Items to start from when the collection is absent

        Returns:
            The ``result`` produced by ``operation``.

        Raises:
            ConcurrentModificationError: Another writer committed first.
        """
        items, version = self.get_versioned(name)
        current = items if items is not None else list(default or [])
        new_items, result = operation(current)
        if new_items is not None:
            self.compare_and_set(name, new_items, version)
        return result

    def update(
        self,
        name: str,
        transform: Callable[[Collection], Collection],
        default: Collection | None = None,
    ) -> Collection:
        """Read-modify-write with a transform over the previous collection."""

        def operation(items: Collection) -> tuple[Collection, Collection]:
            new_items = transform(items)
            return new_items, new_items

        return self.modify(name, operation, default=default)

    def version(self, name: str) -> int:
        """Current version token of a collection."""
        _, version = self.get_versioned(name)
        return version

    def stored_schema_version(self, name: str) -> int | None:
        """Schema version a collection was written with, or None if absent."""
        _, _, stored_schema = self._read(name)
        return stored_schema
