"""
Local store handle for the catalog replica.

Provides the CatalogStore, the single shared handle to the local SQLite
file. Every component that touches the local store receives the same
CatalogStore instance; nothing opens the database on its own.

Access model:
- Readers call store.reader(), which takes the shared side of the
  store's ReadWriteLock while a connection is obtained and used
- The sync swap calls store.writer(), which takes the exclusive side
- Shadow-table staging uses store.connect() directly; readers never
  look at shadow tables, so staging needs no lock

Each operation gets its own connection, closed when the context exits.
SQLite settings applied to every connection:
- WAL mode so readers are not blocked while a sync stages its tables
- dict_factory for row["column"] access

Usage:
    from modcat.core.catalog.db import CatalogStore

    store = CatalogStore(Path("mods.db"))
    store.initialize()

    with store.reader() as conn:
        for row in query(conn, "SELECT name FROM info"):
            print(row["name"])
"""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from modcat.core.catalog.db.lock import ReadWriteLock
from modcat.core.catalog.db.schema import INFO_TABLE, VERSIONS_TABLE, ensure_schema
from modcat.core.catalog.errors import (
    ConnectionFailedError,
    ExecFailedError,
    QueryFailedError,
)

logger = logging.getLogger(__name__)

Params = tuple[Any, ...] | dict[str, Any]


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """
    Row factory that returns rows as dictionaries.

    Args:
        cursor: SQLite cursor
        row: Raw row tuple from database

    Returns:
        Dictionary mapping column names to values
    """
    fields = [column[0] for column in cursor.description]
    return dict(zip(fields, row))


def configure_connection(conn: sqlite3.Connection) -> None:
    """
    Configure a SQLite connection for catalog use.

    Args:
        conn: SQLite connection to configure
    """
    conn.execute("PRAGMA journal_mode=WAL")
    conn.row_factory = dict_factory


def query(
    conn: sqlite3.Connection,
    sql: str,
    params: Params | None = None,
) -> Iterator[dict[str, Any]]:
    """
    Run a read query and stream its rows.

    The returned iterator is lazy, finite and single-pass: rows are pulled
    from the cursor as the caller iterates, and re-reading requires issuing
    the query again. It must be consumed before the connection closes.

    Args:
        conn: SQLite connection
        sql: SQL query string
        params: Query parameters (tuple or dict)

    Returns:
        Iterator over row dictionaries

    Raises:
        QueryFailedError: If the statement fails, either when issued or
            while rows are being read
    """
    try:
        cursor = conn.execute(sql, params or ())
    except sqlite3.Error as e:
        raise QueryFailedError(f"Query failed: {e}") from e
    return _stream(cursor)


def _stream(cursor: sqlite3.Cursor) -> Iterator[dict[str, Any]]:
    try:
        while True:
            row = cursor.fetchone()
            if row is None:
                return
            yield row
    except sqlite3.Error as e:
        raise QueryFailedError(f"Reading query results failed: {e}") from e
    finally:
        cursor.close()


def execute(
    conn: sqlite3.Connection,
    sql: str,
    params: Params | None = None,
) -> int:
    """
    Run a write or DDL statement.

    Does not commit.

    Args:
        conn: SQLite connection
        sql: SQL statement
        params: Statement parameters (tuple or dict)

    Returns:
        Number of rows changed by the statement

    Raises:
        ExecFailedError: If the statement fails
    """
    try:
        cursor = conn.execute(sql, params or ())
    except sqlite3.Error as e:
        raise ExecFailedError(f"Statement failed: {e}") from e
    return cursor.rowcount


class CatalogStore:
    """
    Shared handle to the local catalog database.

    Example:
        >>> store = CatalogStore(tmp_path / "mods.db")
        >>> store.initialize()
        >>> with store.reader() as conn:
        ...     rows = list(query(conn, "SELECT * FROM info"))
    """

    def __init__(self, db_path: Path | str, *, lock: ReadWriteLock | None = None) -> None:
        """
        Initialize the store handle.

        No file is opened here; call initialize() to create the schema.

        Args:
            db_path: Path to the SQLite database file
            lock: Lock coordinating readers and the sync swap (a new one
                is created if omitted)
        """
        self.db_path = Path(db_path)
        self.lock = lock or ReadWriteLock()

    def initialize(self) -> None:
        """
        Create the database file and the catalog tables if missing.

        Safe to call on every process start: existing data is kept.

        Raises:
            ConnectionFailedError: If the database cannot be opened
            SchemaError: If the tables cannot be created
        """
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self.connect()
        try:
            ensure_schema(conn)
        finally:
            conn.close()
        logger.info(f"Local catalog ready at {self.db_path}")

    def connect(self) -> sqlite3.Connection:
        """
        Open a new configured connection to the local store.

        The caller owns the connection and must close it.

        Returns:
            Configured SQLite connection

        Raises:
            ConnectionFailedError: If the database cannot be opened
        """
        try:
            conn = sqlite3.connect(str(self.db_path))
            configure_connection(conn)
        except sqlite3.Error as e:
            logger.error(f"Failed to open local catalog {self.db_path}: {e}")
            raise ConnectionFailedError(f"Failed to open local catalog: {e}") from e
        return conn

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """
        Get an unlocked connection as a context manager.

        Rolled back if the block raises, closed on exit.
        """
        conn = self.connect()
        try:
            yield conn
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @contextmanager
    def reader(self) -> Iterator[sqlite3.Connection]:
        """
        Get a connection while holding the shared (read) lock.

        Yields:
            Configured SQLite connection

        Raises:
            ConnectionFailedError: If the database cannot be opened
        """
        with self.lock.read_locked():
            with self.connection() as conn:
                yield conn

    @contextmanager
    def writer(self) -> Iterator[sqlite3.Connection]:
        """
        Get a connection while holding the exclusive (write) lock.

        No reader holds a connection from this store while the block runs.

        Yields:
            Configured SQLite connection

        Raises:
            ConnectionFailedError: If the database cannot be opened
        """
        with self.lock.write_locked():
            with self.connection() as conn:
                yield conn

    def stats(self) -> dict[str, int]:
        """
        Count the rows of the live tables.

        Returns:
            Dict with "mods" and "versions" row counts

        Raises:
            StoreError: If the counts cannot be read
        """
        with self.reader() as conn:
            counts: dict[str, int] = {}
            for key, table in (("mods", INFO_TABLE), ("versions", VERSIONS_TABLE)):
                rows = list(query(conn, f"SELECT COUNT(*) AS count FROM {table}"))
                counts[key] = rows[0]["count"]
            return counts
