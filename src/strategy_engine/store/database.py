"""
SQLite entity store.

One row per named collection holding the JSON-encoded records, the version
token used for compare-and-swap, and the schema version it was written with.

Location: .strategy/strategy.db (project root)
"""

import json
import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from ..errors import ConcurrentModificationError
from .base import ABSENT_VERSION, Collection, EntityStore
from .schema import schema_version_for

logger = logging.getLogger(__name__)

# Database layout version (distinct from per-collection schema versions)
SCHEMA_VERSION = "1.0.0"

STRATEGY_DIR = ".strategy"
DB_FILENAME = "strategy.db"

SCHEMA = """
-- Schema metadata
CREATE TABLE IF NOT EXISTS schema_info (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

-- Named collections (whole-collection records)
CREATE TABLE IF NOT EXISTS collections (
    name TEXT PRIMARY KEY,
    payload TEXT NOT NULL,                  -- JSON array of records
    version INTEGER NOT NULL,               -- compare-and-swap token
    schema_version INTEGER NOT NULL,        -- shape version of the records
    updated_at TEXT NOT NULL
);
"""


def get_default_db_path(project_root: Path | None = None) -> Path:
    """Get the default store path.

    Args:
        project_root: Project root; defaults to the current directory.

    Returns:
        Path to .strategy/strategy.db
    """
    root = Path(project_root) if project_root else Path.cwd()
    return root / STRATEGY_DIR / DB_FILENAME


class SQLiteEntityStore(EntityStore):
    """Entity store persisted in a single SQLite file."""

    def __init__(
        self,
        db_path: Path | str | None = None,
        project_root: Path | None = None,
        timeout: float = 5.0,
    ):
        """Initialize the store, creating the file and schema if needed.

        Args:
            db_path: Explicit path to database file.
            project_root: Project root for project-local database.
                         Ignored if db_path is provided.
            timeout: Seconds to wait on a locked database.
        """
        if db_path:
            self.db_path = Path(db_path)
        else:
            self.db_path = get_default_db_path(project_root)
        self.timeout = timeout

        self._ensure_db_exists()

    def _ensure_db_exists(self) -> None:
        """Create database and schema if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with self.connection() as conn:
            conn.executescript(SCHEMA)
            conn.execute(
                "INSERT OR REPLACE INTO schema_info (key, value) VALUES (?, ?)",
                ("schema_version", SCHEMA_VERSION),
            )
        logger.debug(f"Entity store ready at {self.db_path}")

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections.

        Yields:
            sqlite3.Connection with row_factory set to sqlite3.Row
        """
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode = WAL")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _read(self, name: str) -> tuple[Collection | None, int, int | None]:
        with self.connection() as conn:
            row = conn.execute(
                "SELECT payload, version, schema_version FROM collections WHERE name = ?",
                (name,),
            ).fetchone()
        if row is None:
            return None, ABSENT_VERSION, None
        return json.loads(row["payload"]), row["version"], row["schema_version"]

    def _write(
        self, name: str, items: Collection, expected_version: int | None
    ) -> int:
        payload = json.dumps(items)
        with self.connection() as conn:
            # Take the write lock before reading the version
            conn.execute("BEGIN IMMEDIATE")
            row = conn.execute(
                "SELECT version FROM collections WHERE name = ?", (name,)
            ).fetchone()
            current = row["version"] if row else ABSENT_VERSION
            if expected_version is not None and current != expected_version:
                raise ConcurrentModificationError(
                    f"Collection '{name}' changed (version {current}, "
                    f"expected {expected_version})",
                    collection=name,
                    version=current,
                    expected=expected_version,
                )
            new_version = current + 1
            conn.execute(
                """
                INSERT OR REPLACE INTO collections
                    (name, payload, version, schema_version, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    name,
                    payload,
                    new_version,
                    schema_version_for(name),
                    datetime.now().isoformat(),
                ),
            )
        return new_version

    def collections(self) -> list[str]:
        with self.connection() as conn:
            rows = conn.execute("SELECT name FROM collections ORDER BY name").fetchall()
        return [row["name"] for row in rows]

    def get_schema_version(self) -> str:
        """Get database layout version."""
        with self.connection() as conn:
            row = conn.execute(
                "SELECT value FROM schema_info WHERE key = ?", ("schema_version",)
            ).fetchone()
        return row["value"] if row else "0.0.0"

    def reset(self) -> None:
        """Drop every collection. USE WITH CAUTION."""
        with self.connection() as conn:
            conn.executescript("""
                DROP TABLE IF EXISTS collections;
                DROP TABLE IF EXISTS schema_info;
            """)
        self._ensure_db_exists()
