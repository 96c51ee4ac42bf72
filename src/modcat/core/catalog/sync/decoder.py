"""
Strict decoding of fetched rows into catalog entities.

The column layout of a table result is checked once (count and names,
in order); each row is then validated against the entity model, which
enforces types and nullability. The first malformed row stops decoding
with a single RowDecodeError naming the table, row and reason.
"""

from collections.abc import Iterable, Iterator, Sequence
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from modcat.core.catalog.db.schema import (
    INFO_COLUMNS,
    INFO_TABLE,
    VERSIONS_COLUMNS,
    VERSIONS_TABLE,
)
from modcat.core.catalog.errors import RowDecodeError
from modcat.core.catalog.models import ModInfo, Version

T = TypeVar("T", bound=BaseModel)


def _describe(error: ValidationError) -> str:
    first = error.errors()[0] if error.errors() else {}
    field = ".".join(str(loc) for loc in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"{field}: {message}" if field else message


class RowDecoder(Generic[T]):
    """
    Decodes rows of one table into a model.

    Example:
        >>> decoder = RowDecoder("info", INFO_COLUMNS, ModInfo)
        >>> decoder.check_columns(("name", "author", "icon_src", "short_desc", "long_desc"))
        >>> decoder.decode(0, ("Foo", "Bar", None, "short", "long")).name
        'Foo'
    """

    def __init__(self, table: str, columns: Sequence[str], model: type[T]) -> None:
        self.table = table
        self.columns = tuple(columns)
        self.model = model

    def check_columns(self, columns: Sequence[str]) -> None:
        """
        Verify a result's column layout.

        Raises:
            RowDecodeError: If the column count or names differ
        """
        actual = tuple(columns)
        if len(actual) != len(self.columns):
            raise RowDecodeError(
                self.table,
                None,
                f"expected {len(self.columns)} columns, got {len(actual)}",
            )
        if actual != self.columns:
            raise RowDecodeError(
                self.table,
                None,
                f"expected columns {list(self.columns)}, got {list(actual)}",
            )

    def decode(self, index: int, row: Sequence[Any]) -> T:
        """
        Decode one row.

        Args:
            index: Position of the row in the result (for error messages)
            row: Row values in column order

        Raises:
            RowDecodeError: If the row has the wrong length or a value has
                the wrong type or is null where null is not allowed
        """
        if len(row) != len(self.columns):
            raise RowDecodeError(
                self.table, index, f"expected {len(self.columns)} values, got {len(row)}"
            )
        try:
            return self.model.model_validate(dict(zip(self.columns, row)))
        except ValidationError as e:
            raise RowDecodeError(self.table, index, _describe(e)) from e

    def decode_all(self, columns: Sequence[str], rows: Iterable[Sequence[Any]]) -> Iterator[T]:
        """Check the layout once, then lazily decode each row."""
        self.check_columns(columns)
        for index, row in enumerate(rows):
            yield self.decode(index, row)


def mod_info_decoder() -> RowDecoder[ModInfo]:
    return RowDecoder(INFO_TABLE, INFO_COLUMNS, ModInfo)


def version_decoder() -> RowDecoder[Version]:
    return RowDecoder(VERSIONS_TABLE, VERSIONS_COLUMNS, Version)
