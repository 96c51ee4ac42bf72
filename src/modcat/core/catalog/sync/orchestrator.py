"""
Sync orchestrator for the local catalog replica.

Replaces the local info/versions tables with a full snapshot of the
remote database. The local store is a disposable cache: nothing is
merged, every cycle rebuilds both tables from scratch.

Sync Flow:
1. Authenticating: compare the presented token to the sync secret
2. Dropping: drop shadow tables left over from an earlier failed cycle
3. Recreating: create empty shadow tables (info__next, versions__next)
4. Fetching: SELECT * from the remote info and versions tables
5. Repopulating: decode every row strictly and insert it into the
   shadow tables, then commit
6. Swapping: under the store's exclusive lock, drop the live tables and
   rename the shadow tables into place in one transaction

Failure Handling:
- A rejected token touches nothing and reports state REJECTED; it is
  checked before waiting for a running cycle
- Any failure in steps 2-6 leaves the live tables as they were, discards
  the shadow tables and reports state FAILED with the error messages
- Nothing is raised to the caller; the SyncResult carries the outcome

Readers only wait for step 6. While the remote is fetched and the shadow
tables are filled, queries keep being answered from the previous data.

Usage:
    from modcat.core.catalog.sync import SyncOrchestrator

    orchestrator = SyncOrchestrator(store, fetcher, sync_token="secret")
    result = orchestrator.run_sync(presented_token)
    print(f"Synced {result.mods_synced} mods, {result.versions_synced} versions")
"""

import logging
import secrets
import sqlite3
import threading
import time
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Protocol

from modcat.core.catalog.db.connection import CatalogStore
from modcat.core.catalog.db.schema import (
    INFO_TABLE,
    SHADOW_SUFFIX,
    VERSIONS_TABLE,
    drop_tables,
    ensure_schema,
    table_names,
)
from modcat.core.catalog.errors import CatalogError, UnauthorizedError
from modcat.core.catalog.models import SyncResult, SyncState
from modcat.core.catalog.sync.decoder import mod_info_decoder, version_decoder
from modcat.core.catalog.sync.remote import RemoteFetcher, TableSnapshot
from modcat.core.catalog.sync.writer import CatalogWriter
from modcat.core.config.models import CatalogSettings

logger = logging.getLogger(__name__)


class TableFetcher(Protocol):
    """Anything that can read whole tables from the remote database."""

    def fetch_tables(self, tables: Sequence[str]) -> dict[str, TableSnapshot]: ...


class SyncOrchestrator:
    """
    Orchestrates full-replace syncs of the local catalog.

    One cycle runs at a time; a second authenticated caller blocks until
    the running cycle has finished. Rejected callers never wait.

    Example:
        >>> orchestrator = SyncOrchestrator(store, fetcher, sync_token="s3cret")
        >>> result = orchestrator.run_sync("s3cret")
        >>> print(f"Success: {result.success}")
    """

    def __init__(
        self,
        store: CatalogStore,
        fetcher: TableFetcher,
        sync_token: str | None = None,
    ) -> None:
        """
        Initialize the SyncOrchestrator.

        Args:
            store: Local catalog store to repopulate
            fetcher: Reader for the remote database
            sync_token: Secret a caller must present to run_sync(); if None,
                every presented token is rejected
        """
        self.store = store
        self.fetcher = fetcher
        self._sync_token = sync_token
        self._cycle_lock = threading.Lock()
        self._state = SyncState.IDLE
        self._last_result: SyncResult | None = None

    @classmethod
    def from_settings(cls, store: CatalogStore, settings: CatalogSettings) -> "SyncOrchestrator":
        """
        Build an orchestrator reading from the configured remote database.

        Args:
            store: Local catalog store to repopulate
            settings: Loaded settings (remote_url, remote_auth_token,
                sync_token)

        Returns:
            SyncOrchestrator backed by a RemoteFetcher
        """
        fetcher = RemoteFetcher(settings.remote_url or "", settings.remote_auth_token)
        return cls(store, fetcher, sync_token=settings.sync_token)

    @property
    def state(self) -> SyncState:
        """Current state, or the terminal state of the last cycle."""
        return self._state

    @property
    def last_result(self) -> SyncResult | None:
        """Result of the most recent cycle, if any has run."""
        return self._last_result

    def _set_state(self, state: SyncState) -> None:
        logger.debug(f"Sync state: {self._state.value} -> {state.value}")
        self._state = state

    def authenticate(self, presented_token: str) -> None:
        """
        Check a presented token against the sync secret.

        Exact string equality, compared in constant time.

        Raises:
            UnauthorizedError: If the token does not match
        """
        if self._sync_token is None:
            raise UnauthorizedError("No sync token configured")
        if not secrets.compare_digest(
            presented_token.encode("utf-8"), self._sync_token.encode("utf-8")
        ):
            raise UnauthorizedError("Sync token mismatch")

    def run_sync(self, presented_token: str) -> SyncResult:
        """
        Authenticate a sync request and, if accepted, run a sync cycle.

        Args:
            presented_token: Token supplied by the caller

        Returns:
            SyncResult; state REJECTED if the token did not match
        """
        try:
            self.authenticate(presented_token)
        except UnauthorizedError:
            logger.warning("Unauthorized sync attempt")
            result = SyncResult(
                success=False,
                state=SyncState.REJECTED,
                errors=["Unauthorized"],
                started_at=datetime.now(timezone.utc),
            )
            # A running cycle keeps its own state
            if self._cycle_lock.acquire(blocking=False):
                try:
                    self._set_state(SyncState.REJECTED)
                    self._last_result = result
                finally:
                    self._cycle_lock.release()
            return result

        with self._cycle_lock:
            self._set_state(SyncState.AUTHENTICATING)
            return self._run_cycle()

    def sync(self) -> SyncResult:
        """
        Run a sync cycle without authentication.

        For trusted callers only (the operator CLI and the scheduler).

        Returns:
            SyncResult with row counts and any errors
        """
        with self._cycle_lock:
            return self._run_cycle()

    def _run_cycle(self) -> SyncResult:
        started_at = datetime.now(timezone.utc)
        start_time = time.time()
        errors: list[str] = []
        mods_synced = 0
        versions_synced = 0

        logger.info("Starting catalog sync")

        try:
            with self.store.connection() as conn:
                self._set_state(SyncState.DROPPING)
                logger.info("Dropping stale shadow tables")
                drop_tables(conn, suffix=SHADOW_SUFFIX)
                conn.commit()

                self._set_state(SyncState.RECREATING)
                logger.info("Creating shadow tables")
                ensure_schema(conn, suffix=SHADOW_SUFFIX)

                self._set_state(SyncState.FETCHING)
                snapshots = self.fetcher.fetch_tables([INFO_TABLE, VERSIONS_TABLE])
                info = snapshots[INFO_TABLE]
                versions = snapshots[VERSIONS_TABLE]

                self._set_state(SyncState.REPOPULATING)
                writer = CatalogWriter(conn, suffix=SHADOW_SUFFIX)
                logger.info("Adding data to info...")
                mods_synced = writer.write_mods(
                    mod_info_decoder().decode_all(info.columns, info.iter_rows())
                )
                logger.info("Adding data to versions...")
                versions_synced = writer.write_versions(
                    version_decoder().decode_all(versions.columns, versions.iter_rows())
                )
                conn.commit()

            self._set_state(SyncState.SWAPPING)
            self._swap()

        except (CatalogError, sqlite3.Error) as e:
            error_msg = f"Sync failed during {self._state.value}: {e}"
            logger.error(error_msg)
            errors.append(error_msg)
            errors.extend(self._discard_shadow())
        except Exception as e:
            error_msg = f"Unexpected error during {self._state.value}: {type(e).__name__}: {e}"
            logger.exception(error_msg)
            errors.append(error_msg)
            errors.extend(self._discard_shadow())

        duration = time.time() - start_time

        if errors:
            self._set_state(SyncState.FAILED)
            result = SyncResult(
                success=False,
                state=SyncState.FAILED,
                errors=errors,
                started_at=started_at,
                duration_seconds=duration,
            )
            logger.error(f"Sync failed after {duration:.2f}s; previous catalog kept")
        else:
            self._set_state(SyncState.IDLE)
            result = SyncResult(
                success=True,
                state=SyncState.IDLE,
                mods_synced=mods_synced,
                versions_synced=versions_synced,
                started_at=started_at,
                duration_seconds=duration,
            )
            logger.info(
                f"Synced! {mods_synced} mods, {versions_synced} versions in {duration:.2f}s"
            )

        self._last_result = result
        return result

    def _swap(self) -> None:
        """Replace the live tables with the shadow tables atomically."""
        shadow_info, shadow_versions = table_names(SHADOW_SUFFIX)
        with self.store.writer() as conn:
            conn.execute("BEGIN IMMEDIATE")
            drop_tables(conn)
            conn.execute(f"ALTER TABLE {shadow_info} RENAME TO {INFO_TABLE}")
            conn.execute(f"ALTER TABLE {shadow_versions} RENAME TO {VERSIONS_TABLE}")
            conn.commit()
        logger.info("Swapped new catalog into place")

    def _discard_shadow(self) -> list[str]:
        """Drop the shadow tables after a failed cycle; returns cleanup errors."""
        try:
            with self.store.connection() as conn:
                drop_tables(conn, suffix=SHADOW_SUFFIX)
                conn.commit()
        except (CatalogError, sqlite3.Error) as e:
            error_msg = f"Failed to discard shadow tables: {e}"
            logger.error(error_msg)
            return [error_msg]
        return []
