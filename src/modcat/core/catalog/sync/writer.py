"""
SQLite writer for the sync layer.

Writes decoded ModInfo and Version rows into the catalog tables named by
a suffix (normally the shadow tables of an in-flight sync), preserving
column order and nulls exactly as fetched.

Usage:
    from modcat.core.catalog.sync.writer import CatalogWriter

    with store.connection() as conn:
        writer = CatalogWriter(conn, suffix=SHADOW_SUFFIX)
        writer.write_mods(mods)
        writer.write_versions(versions)
        conn.commit()
"""

import logging
import sqlite3
from collections.abc import Iterable

from modcat.core.catalog.db.connection import execute
from modcat.core.catalog.db.schema import table_names
from modcat.core.catalog.models import ModInfo, Version

logger = logging.getLogger(__name__)


class CatalogWriter:
    """
    Writer for catalog rows.

    Does not commit; the caller owns the transaction.
    """

    def __init__(self, conn: sqlite3.Connection, *, suffix: str = "") -> None:
        """
        Initialize the CatalogWriter.

        Args:
            conn: SQLite connection
            suffix: Table name suffix selecting live or shadow tables
        """
        self.conn = conn
        self.info_table, self.versions_table = table_names(suffix)

    def write_mod(self, mod: ModInfo) -> None:
        """
        Insert a single info row.

        Raises:
            ExecFailedError: If the insert fails
        """
        execute(
            self.conn,
            f"INSERT INTO {self.info_table} VALUES (?, ?, ?, ?, ?)",
            (mod.name, mod.author, mod.icon_src, mod.short_desc, mod.long_desc),
        )

    def write_version(self, version: Version) -> None:
        """
        Insert a single versions row.

        Raises:
            ExecFailedError: If the insert fails (including a duplicate id)
        """
        execute(
            self.conn,
            f"INSERT INTO {self.versions_table} VALUES (?, ?, ?, ?, ?)",
            (version.id, version.name, version.link, version.version, version.changelog),
        )

    def write_mods(self, mods: Iterable[ModInfo]) -> int:
        """
        Insert info rows in order.

        Args:
            mods: Decoded info rows (may be a lazy iterator)

        Returns:
            Number of rows written
        """
        written = 0
        for mod in mods:
            self.write_mod(mod)
            written += 1
        logger.debug(f"Wrote {written} rows to {self.info_table}")
        return written

    def write_versions(self, versions: Iterable[Version]) -> int:
        """
        Insert versions rows in order.

        Args:
            versions: Decoded versions rows (may be a lazy iterator)

        Returns:
            Number of rows written
        """
        written = 0
        for version in versions:
            self.write_version(version)
            written += 1
        logger.debug(f"Wrote {written} rows to {self.versions_table}")
        return written
