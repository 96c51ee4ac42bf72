"""
Exception hierarchy for the mod catalog.

Every failure the catalog can produce is a CatalogError. The read path
lets StoreError subclasses propagate to the HTTP layer, which collapses
them into a single 500 response. The sync path never lets these escape
the orchestrator; they are recorded in the SyncResult instead.

Hierarchy:
    CatalogError
    ├── StoreError
    │   ├── ConnectionFailedError
    │   ├── QueryFailedError
    │   ├── ExecFailedError
    │   └── SchemaError
    ├── RemoteError
    │   ├── RemoteConnectionError
    │   └── RemoteQueryError
    ├── RowDecodeError
    ├── ModNotFoundError
    └── UnauthorizedError
"""


class CatalogError(Exception):
    """Base class for all catalog errors."""


class StoreError(CatalogError):
    """The local store could not serve a request."""


class ConnectionFailedError(StoreError):
    """A connection to the local store could not be opened."""


class QueryFailedError(StoreError):
    """A read query against the local store failed."""


class ExecFailedError(StoreError):
    """A write or DDL statement against the local store failed."""


class SchemaError(ExecFailedError):
    """The catalog tables could not be created."""


class RemoteError(CatalogError):
    """The remote database could not be read."""


class RemoteConnectionError(RemoteError):
    """Transport-level failure talking to the remote database."""


class RemoteQueryError(RemoteError):
    """The remote database rejected a statement or sent a malformed reply."""


class RowDecodeError(CatalogError):
    """
    A fetched row does not match the expected table shape.

    Attributes:
        table: Name of the table the row came from
        row_index: Zero-based position of the row in the result, or None
            when the column layout itself is wrong
        reason: Human-readable description of the mismatch
    """

    def __init__(self, table: str, row_index: int | None, reason: str) -> None:
        self.table = table
        self.row_index = row_index
        self.reason = reason
        where = f"row {row_index}" if row_index is not None else "columns"
        super().__init__(f"Malformed {table} {where}: {reason}")


class ModNotFoundError(CatalogError):
    """No mod with the requested name exists."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Mod not found: {name}")


class UnauthorizedError(CatalogError):
    """The presented sync token does not match the configured secret."""
