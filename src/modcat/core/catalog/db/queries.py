"""
Catalog read queries.

Provides the two read operations served by the API:
- list_mods: summaries of every mod that has at least one version,
  most recently released first
- get_mod: one mod's details with its full version history

Both run under the store's shared lock and fully consume their row
streams before the lock is released. Any store failure surfaces as a
StoreError; absence of a mod is the separate ModNotFoundError.
"""

import logging
from typing import Any

from modcat.core.catalog.db.connection import CatalogStore, query
from modcat.core.catalog.errors import ModNotFoundError
from modcat.core.catalog.models import ModEntry, ModInfoData, ModListEntry, VersionData

logger = logging.getLogger(__name__)

# Inner join drops mods without versions; grouping collapses each mod to
# its newest version id.
MOD_LIST_SQL = """
    SELECT info.name, info.author, info.icon_src, info.short_desc
    FROM info INNER JOIN versions ON info.name = versions.name
    GROUP BY info.name
    ORDER BY MAX(versions.id) DESC
"""

MOD_INFO_SQL = """
    SELECT name, author, icon_src, long_desc
    FROM info
    WHERE name = ?
    LIMIT 1
"""

# Plain text ordering: "2.0" sorts above "10.0"
MOD_VERSIONS_SQL = """
    SELECT link, version, changelog
    FROM versions
    WHERE name = ?
    ORDER BY version DESC
"""


def row_to_list_entry(row: dict[str, Any]) -> ModListEntry:
    """Convert a mod list row to a ModListEntry."""
    return ModListEntry(
        name=row["name"],
        author=row["author"],
        icon_src=row["icon_src"],
        short_desc=row["short_desc"],
    )


def list_mods(store: CatalogStore) -> list[ModListEntry]:
    """
    List every mod that has at least one version.

    Ordered by the highest version id of each mod, descending, so the
    mod with the most recent release comes first.

    Args:
        store: Local catalog store

    Returns:
        List of mod summaries

    Raises:
        StoreError: If the store cannot be opened or queried

    Example:
        >>> mods = list_mods(store)
        >>> [m.name for m in mods]
        ['Newest Mod', 'Older Mod']
    """
    with store.reader() as conn:
        return [row_to_list_entry(row) for row in query(conn, MOD_LIST_SQL)]


def get_mod(store: CatalogStore, name: str) -> ModEntry:
    """
    Get a mod and its version history by exact name.

    The name match is case-sensitive and literal; "%" and "_" in the name
    carry no special meaning.

    Versions are ordered by their version label, descending, as plain text.
    A mod without versions is returned with an empty list.

    Args:
        store: Local catalog store
        name: Exact mod name

    Returns:
        ModEntry with mod info and versions

    Raises:
        ModNotFoundError: If no mod has this name
        StoreError: If the store cannot be opened or queried
    """
    with store.reader() as conn:
        info_rows = list(query(conn, MOD_INFO_SQL, (name,)))
        if not info_rows:
            logger.info(f"mod_info for {name} not found")
            raise ModNotFoundError(name)

        info = info_rows[0]
        versions = [
            VersionData(
                link=row["link"],
                version=row["version"],
                changelog=row["changelog"],
            )
            for row in query(conn, MOD_VERSIONS_SQL, (name,))
        ]

    return ModEntry(
        mod_info=ModInfoData(
            name=info["name"],
            author=info["author"],
            icon_src=info["icon_src"],
            long_desc=info["long_desc"],
        ),
        versions=versions,
    )
