"""
Tests for the modcat CLI.

Tests cover:
- Root options (--help, --version)
- modcat stats
- modcat sync (success, failure, missing configuration)
- modcat serve (startup checks, option overrides, --sync-on-start)
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from fakes import SYNC_TOKEN, FakeFetcher, seed
from modcat import __version__
from modcat.cli import app
from modcat.core.catalog.db.connection import CatalogStore
from modcat.core.catalog.errors import RemoteConnectionError
from modcat.core.catalog.sync.orchestrator import SyncOrchestrator

runner = CliRunner()


@pytest.fixture
def cli_env(tmp_path: Path, monkeypatch) -> Path:
    """Run the CLI from an empty directory with no user .env."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    db_path = tmp_path / "mods.db"
    monkeypatch.setenv("MODCAT_DB_PATH", str(db_path))
    return db_path


@pytest.fixture
def remote_env(cli_env: Path, monkeypatch) -> Path:
    monkeypatch.setenv("DB_URL", "libsql://mods.example.io")
    monkeypatch.setenv("AUTH", "remote-token")
    monkeypatch.setenv("SYNC_AUTH", SYNC_TOKEN)
    return cli_env


@pytest.fixture
def fake_remote(monkeypatch) -> FakeFetcher:
    """Route SyncOrchestrator.from_settings to an in-memory remote."""
    fetcher = FakeFetcher()

    def from_settings(cls, store, settings):
        return cls(store, fetcher, sync_token=settings.sync_token)

    monkeypatch.setattr(SyncOrchestrator, "from_settings", classmethod(from_settings))
    return fetcher


class TestRoot:
    """Tests for root CLI options."""

    def test_help(self, cli_env: Path) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("serve", "sync", "stats"):
            assert command in result.output

    def test_version(self, cli_env: Path) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_env_file_is_loaded(self, cli_env: Path, monkeypatch) -> None:
        seed_store = CatalogStore(cli_env.parent / "from-dotenv.db")
        seed_store.initialize()
        seed(seed_store)
        monkeypatch.delenv("MODCAT_DB_PATH")
        Path(".env").write_text(f"MODCAT_DB_PATH={seed_store.db_path}\n")

        result = runner.invoke(app, ["stats"])

        assert result.exit_code == 0, result.output
        monkeypatch.delenv("MODCAT_DB_PATH", raising=False)


class TestStats:
    """Tests for modcat stats."""

    def test_missing_database(self, cli_env: Path) -> None:
        result = runner.invoke(app, ["stats"])
        assert result.exit_code == 1
        assert "No local catalog" in result.output

    def test_counts(self, cli_env: Path) -> None:
        store = CatalogStore(cli_env)
        store.initialize()
        seed(store)

        result = runner.invoke(app, ["stats"])

        assert result.exit_code == 0
        assert "info" in result.output
        assert "3" in result.output
        assert "4" in result.output

    def test_unreadable_database(self, cli_env: Path) -> None:
        cli_env.write_bytes(b"")

        result = runner.invoke(app, ["stats"])

        assert result.exit_code == 1
        assert "Error" in result.output


class TestSync:
    """Tests for modcat sync."""

    def test_missing_configuration(self, cli_env: Path) -> None:
        result = runner.invoke(app, ["sync"])
        assert result.exit_code == 1
        assert "DB_URL" in result.output
        assert "SYNC_AUTH" in result.output

    def test_success(self, remote_env: Path, fake_remote: FakeFetcher) -> None:
        result = runner.invoke(app, ["sync"])

        assert result.exit_code == 0, result.output
        assert "Sync successful" in result.output
        assert "Mods: 3" in result.output
        assert "Versions: 4" in result.output
        assert CatalogStore(remote_env).stats() == {"mods": 3, "versions": 4}

    def test_failure(self, remote_env: Path, fake_remote: FakeFetcher) -> None:
        fake_remote.error = RemoteConnectionError("connection refused")

        result = runner.invoke(app, ["sync"])

        assert result.exit_code == 1
        assert "Sync failed" in result.output
        assert "connection refused" in result.output


class TestServe:
    """Tests for modcat serve."""

    def test_missing_configuration(self, cli_env: Path) -> None:
        with patch("modcat.cli.serve.uvicorn.run") as mock_run:
            result = runner.invoke(app, ["serve"])
        assert result.exit_code == 1
        assert "Missing required configuration" in result.output
        mock_run.assert_not_called()

    def test_starts_server(self, remote_env: Path, fake_remote: FakeFetcher) -> None:
        with patch("modcat.cli.serve.uvicorn.run") as mock_run:
            result = runner.invoke(app, ["serve", "--host", "127.0.0.1", "--port", "9001"])

        assert result.exit_code == 0, result.output
        _, kwargs = mock_run.call_args
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9001
        assert CatalogStore(remote_env).stats() == {"mods": 0, "versions": 0}
        assert fake_remote.calls == 0

    def test_sync_on_start(self, remote_env: Path, fake_remote: FakeFetcher) -> None:
        with patch("modcat.cli.serve.uvicorn.run") as mock_run:
            result = runner.invoke(app, ["serve", "--sync-on-start"])

        assert result.exit_code == 0, result.output
        assert "Sync complete: 3 mods, 4 versions" in result.output
        mock_run.assert_called_once()
        assert CatalogStore(remote_env).stats() == {"mods": 3, "versions": 4}

    def test_failed_sync_on_start_still_serves(
        self, remote_env: Path, fake_remote: FakeFetcher
    ) -> None:
        fake_remote.error = RemoteConnectionError("connection refused")

        with patch("modcat.cli.serve.uvicorn.run") as mock_run:
            result = runner.invoke(app, ["serve", "--sync-on-start"])

        assert result.exit_code == 0
        assert "Sync failed" in result.output
        mock_run.assert_called_once()

    def test_schema_failure(self, remote_env: Path, fake_remote: FakeFetcher) -> None:
        remote_env.write_text("this is not a sqlite database" * 100)

        with patch("modcat.cli.serve.uvicorn.run") as mock_run:
            result = runner.invoke(app, ["serve"])

        assert result.exit_code == 1
        mock_run.assert_not_called()
