"""
Tests for the remote libsql fetcher.

The remote is played by a local SQLite file handed to the fetcher through
its connection factory.

Tests cover:
- Whole-table reads and column order
- URL and auth token passed to the client
- Connection cleanup
- Error mapping for unreachable remotes and rejected queries
"""

import sqlite3
from pathlib import Path

import pytest

from fakes import SAMPLE_MODS, SAMPLE_VERSIONS, remote_database
from modcat.core.catalog.db.schema import INFO_COLUMNS, VERSIONS_COLUMNS
from modcat.core.catalog.errors import RemoteConnectionError, RemoteError, RemoteQueryError
from modcat.core.catalog.sync.remote import RemoteFetcher


class RecordingConnection:
    """Wraps a sqlite3 connection and remembers whether it was closed."""

    def __init__(self, conn: sqlite3.Connection, fail_on: str | None = None) -> None:
        self._conn = conn
        self._fail_on = fail_on
        self.closed = False

    def execute(self, sql: str):
        if self._fail_on is not None and self._fail_on in sql:
            raise ValueError("Hrana: stream error: connection reset")
        return self._conn.execute(sql)

    def close(self) -> None:
        self.closed = True
        self._conn.close()


class Connector:
    """Connection factory recording every call."""

    def __init__(self, path: Path, fail_on: str | None = None) -> None:
        self.path = path
        self.fail_on = fail_on
        self.calls: list[tuple[str, str]] = []
        self.connections: list[RecordingConnection] = []

    def __call__(self, url: str, auth_token: str) -> RecordingConnection:
        self.calls.append((url, auth_token))
        conn = RecordingConnection(sqlite3.connect(self.path), self.fail_on)
        self.connections.append(conn)
        return conn


@pytest.fixture
def remote_path(tmp_path: Path) -> Path:
    return remote_database(tmp_path / "remote.db")


class TestRemoteFetcher:
    """Tests for the RemoteFetcher class."""

    def test_fetch_tables(self, remote_path: Path) -> None:
        connect = Connector(remote_path)
        fetcher = RemoteFetcher("libsql://mods.example.io", "remote-token", connect=connect)

        snapshots = fetcher.fetch_tables(["info", "versions"])

        assert snapshots["info"].columns == INFO_COLUMNS
        assert snapshots["info"].rows == SAMPLE_MODS
        assert snapshots["versions"].columns == VERSIONS_COLUMNS
        assert snapshots["versions"].rows == SAMPLE_VERSIONS
        assert len(snapshots["versions"]) == 4

    def test_one_connection_per_fetch(self, remote_path: Path) -> None:
        connect = Connector(remote_path)
        fetcher = RemoteFetcher("libsql://mods.example.io", "remote-token", connect=connect)

        fetcher.fetch_tables(["info", "versions"])

        assert connect.calls == [("libsql://mods.example.io", "remote-token")]
        assert connect.connections[0].closed

    def test_missing_auth_token_sent_empty(self, remote_path: Path) -> None:
        connect = Connector(remote_path)
        RemoteFetcher("http://127.0.0.1:8080", None, connect=connect).fetch_table("info")
        assert connect.calls == [("http://127.0.0.1:8080", "")]

    def test_fetch_table(self, remote_path: Path) -> None:
        fetcher = RemoteFetcher("https://db", "t", connect=Connector(remote_path))

        snapshot = fetcher.fetch_table("info")

        assert snapshot.table == "info"
        assert list(snapshot.iter_rows()) == SAMPLE_MODS

    def test_empty_table_keeps_columns(self, tmp_path: Path) -> None:
        path = remote_database(tmp_path / "empty.db", mods=[], versions=[])
        snapshot = RemoteFetcher("https://db", "t", connect=Connector(path)).fetch_table("info")

        assert snapshot.columns == INFO_COLUMNS
        assert len(snapshot) == 0

    def test_missing_table(self, tmp_path: Path) -> None:
        connect = Connector(tmp_path / "blank.db")
        fetcher = RemoteFetcher("https://db", "t", connect=connect)

        with pytest.raises(RemoteQueryError, match="no such table: info"):
            fetcher.fetch_table("info")
        assert connect.connections[0].closed

    def test_connect_failure(self) -> None:
        def refuse(url: str, auth_token: str):
            raise ValueError("invalid port number")

        fetcher = RemoteFetcher("https://mods.example.io:notaport", "t", connect=refuse)
        with pytest.raises(RemoteConnectionError, match="Failed to connect"):
            fetcher.fetch_table("info")

    def test_unreachable_remote(self, remote_path: Path) -> None:
        connect = Connector(remote_path, fail_on="SELECT 1")
        fetcher = RemoteFetcher("https://db", "t", connect=connect)

        with pytest.raises(RemoteConnectionError, match="Failed to reach.*connection reset"):
            fetcher.fetch_table("info")
        assert connect.connections[0].closed

    def test_failure_mid_fetch(self, remote_path: Path) -> None:
        connect = Connector(remote_path, fail_on="FROM versions")
        fetcher = RemoteFetcher("https://db", "t", connect=connect)

        with pytest.raises(RemoteQueryError, match="on versions"):
            fetcher.fetch_tables(["info", "versions"])
        assert connect.connections[0].closed

    def test_errors_share_base_class(self) -> None:
        assert issubclass(RemoteConnectionError, RemoteError)
        assert issubclass(RemoteQueryError, RemoteError)
