"""
SQLite schema for the local catalog replica.

The local store holds exactly two tables, mirroring the remote database:

- info: one row per mod (name, author, icon_src, short_desc, long_desc)
- versions: one row per release (id, name, link, version, changelog)

versions.name refers to info.name by convention only. There is no foreign
key, and orphaned version rows are neither rejected nor repaired.

The same DDL is used for the shadow tables a sync builds before swapping
them into place; shadow tables carry SHADOW_SUFFIX after the base name.
"""

import logging
import sqlite3

from modcat.core.catalog.errors import SchemaError

logger = logging.getLogger(__name__)

INFO_TABLE = "info"
VERSIONS_TABLE = "versions"

# Suffix for tables built by an in-flight sync
SHADOW_SUFFIX = "__next"

# Column order is significant: remote rows are decoded positionally
INFO_COLUMNS = ("name", "author", "icon_src", "short_desc", "long_desc")
VERSIONS_COLUMNS = ("id", "name", "link", "version", "changelog")

_INFO_DDL = """
CREATE TABLE IF NOT EXISTS {table} (
    name VARCHAR(64),
    author VARCHAR(48),
    icon_src TEXT,
    short_desc VARCHAR(128),
    long_desc TEXT
)
"""

_VERSIONS_DDL = """
CREATE TABLE IF NOT EXISTS {table} (
    id INTEGER PRIMARY KEY,
    name VARCHAR(64),
    link TEXT,
    version VARCHAR(32),
    changelog TEXT
)
"""


def table_names(suffix: str = "") -> tuple[str, str]:
    """
    Get the (info, versions) table names for a suffix.

    Args:
        suffix: "" for the live tables, SHADOW_SUFFIX for the shadow tables

    Returns:
        Tuple of (info table name, versions table name)

    Example:
        >>> table_names()
        ('info', 'versions')
        >>> table_names(SHADOW_SUFFIX)
        ('info__next', 'versions__next')
    """
    return f"{INFO_TABLE}{suffix}", f"{VERSIONS_TABLE}{suffix}"


def ensure_schema(conn: sqlite3.Connection, *, suffix: str = "") -> None:
    """
    Create the info and versions tables if they do not exist.

    Idempotent: calling it on a database that already has the tables
    neither fails nor touches existing rows.

    Args:
        conn: SQLite database connection
        suffix: Table name suffix (see table_names)

    Raises:
        SchemaError: If any DDL statement fails

    Example:
        >>> import sqlite3
        >>> conn = sqlite3.connect(":memory:")
        >>> ensure_schema(conn)
        >>> ensure_schema(conn)  # no-op
        >>> cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        >>> sorted(row[0] for row in cursor.fetchall())
        ['info', 'versions']
    """
    info_table, versions_table = table_names(suffix)
    try:
        conn.execute(_INFO_DDL.format(table=info_table))
        conn.execute(_VERSIONS_DDL.format(table=versions_table))
        conn.commit()
    except sqlite3.Error as e:
        logger.error(f"Failed to create catalog tables {info_table}/{versions_table}: {e}")
        raise SchemaError(f"Failed to create catalog tables: {e}") from e


def drop_tables(conn: sqlite3.Connection, *, suffix: str = "") -> None:
    """
    Drop the info and versions tables for a suffix, if present.

    Does not commit; callers decide the transaction boundary.

    Args:
        conn: SQLite database connection
        suffix: Table name suffix (see table_names)
    """
    for table in table_names(suffix):
        conn.execute(f"DROP TABLE IF EXISTS {table}")


def existing_tables(conn: sqlite3.Connection) -> set[str]:
    """
    List the user tables present in the database.

    Args:
        conn: SQLite database connection

    Returns:
        Set of table names
    """
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"
    )
    rows = cursor.fetchall()
    return {row["name"] if isinstance(row, dict) else row[0] for row in rows}
