"""
Remote fetcher for the authoritative catalog database.

Reads whole tables from a remote libsql/Turso database through the
``libsql`` client. Each fetch opens a fresh remote connection, checks
that the remote answers, runs ``SELECT * FROM <table>`` for every
requested table and closes the connection again.

The client reports every failure as a generic exception, so the fetcher
classifies them by the step that failed:
- opening the connection or the liveness check -> RemoteConnectionError
- a table SELECT -> RemoteQueryError

Usage:
    fetcher = RemoteFetcher("libsql://mods-acme.turso.io", auth_token="...")
    snapshots = fetcher.fetch_tables(["info", "versions"])
    for row in snapshots["info"].iter_rows():
        ...
"""

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

import libsql

from modcat.core.catalog.errors import RemoteConnectionError, RemoteQueryError

logger = logging.getLogger(__name__)

# Called as connect(url, auth_token=...); returns a DB-API style connection
Connector = Callable[..., Any]


@dataclass
class TableSnapshot:
    """
    Full contents of one remote table at fetch time.

    Attributes:
        table: Table name
        columns: Column names in result order
        rows: Row value tuples in result order
    """

    table: str
    columns: tuple[str, ...]
    rows: list[tuple[Any, ...]] = field(default_factory=list)

    def iter_rows(self) -> Iterator[tuple[Any, ...]]:
        """Stream the rows in result order."""
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)


class RemoteFetcher:
    """
    Reads full tables from the remote database.

    Example:
        >>> fetcher = RemoteFetcher("libsql://db.example.io", auth_token="secret")
        >>> info = fetcher.fetch_table("info")
        >>> info.columns
        ('name', 'author', 'icon_src', 'short_desc', 'long_desc')
    """

    def __init__(
        self,
        url: str,
        auth_token: str | None,
        *,
        connect: Connector = libsql.connect,
    ) -> None:
        """
        Initialize the fetcher.

        Args:
            url: Remote database URL (libsql://, https:// or http://)
            auth_token: Auth token for the remote database
            connect: Connection factory (tests pass a local one)
        """
        self.url = url
        self.auth_token = auth_token
        self._connect = connect

    def fetch_table(self, table: str) -> TableSnapshot:
        """
        Fetch every row of one table.

        Args:
            table: Table name

        Returns:
            TableSnapshot with the table's columns and rows

        Raises:
            RemoteConnectionError: If the remote cannot be reached
            RemoteQueryError: If the remote rejects the query
        """
        return self.fetch_tables([table])[table]

    def fetch_tables(self, tables: Sequence[str]) -> dict[str, TableSnapshot]:
        """
        Fetch every row of several tables over one connection.

        Issues ``SELECT * FROM <table>`` for each table in order.

        Args:
            tables: Table names

        Returns:
            Dict mapping table name to its TableSnapshot

        Raises:
            RemoteConnectionError: If the remote cannot be reached
            RemoteQueryError: If the remote rejects a query
        """
        logger.info(f"Fetching {', '.join(tables)} from {self.url}")
        conn = self._open()
        try:
            snapshots: dict[str, TableSnapshot] = {}
            for table in tables:
                snapshots[table] = self._select_all(conn, table)
                logger.debug(f"Fetched {len(snapshots[table])} rows from remote {table}")
            return snapshots
        finally:
            conn.close()

    def _open(self) -> Any:
        try:
            conn = self._connect(self.url, auth_token=self.auth_token or "")
        except Exception as e:
            raise RemoteConnectionError(f"Failed to connect to remote database: {e}") from e
        try:
            conn.execute("SELECT 1").fetchall()
        except Exception as e:
            conn.close()
            raise RemoteConnectionError(f"Failed to reach remote database: {e}") from e
        return conn

    @staticmethod
    def _select_all(conn: Any, table: str) -> TableSnapshot:
        try:
            cursor = conn.execute(f"SELECT * FROM {table}")
            columns = tuple(str(col[0]) for col in cursor.description or ())
            rows = [tuple(row) for row in cursor.fetchall()]
        except Exception as e:
            raise RemoteQueryError(f"Remote query on {table} failed: {e}") from e
        return TableSnapshot(table=table, columns=columns, rows=rows)
