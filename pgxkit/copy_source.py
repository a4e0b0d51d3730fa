"""Row sources for bulk copy and the statements that drive a binary copy."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, List, Sequence, Union

from pgxkit.identifier import Identifier, quote_identifier

Row = Sequence[Any]
TableName = Union[str, Iterable[str]]


class CopyFromRows:
    """A copy source over rows that are already in memory."""

    def __init__(self, rows: Iterable[Row]) -> None:
        self.rows: List[Row] = list(rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)


class CopyFromSlice:
    """A copy source that builds row ``i`` on demand by calling ``next_row(i)``.

    An exception raised by ``next_row`` ends the iteration and aborts the copy.
    """

    def __init__(self, length: int, next_row: Callable[[int], Row]) -> None:
        self.length = length
        self.next_row = next_row

    def __iter__(self) -> Iterator[Row]:
        for index in range(self.length):
            yield self.next_row(index)

    def __len__(self) -> int:
        return max(self.length, 0)


def _quoted_table(table_name: TableName) -> str:
    ident = table_name if isinstance(table_name, Identifier) else Identifier(table_name)
    return ident.sanitize()


def _quoted_columns(column_names: Iterable[str]) -> str:
    return ", ".join(quote_identifier(name) for name in column_names)


def copy_statement(table_name: TableName, column_names: Iterable[str]) -> str:
    """Return the ``copy ... from stdin binary`` statement for a bulk copy."""
    return (
        f"copy {_quoted_table(table_name)} ( {_quoted_columns(column_names)} ) "
        "from stdin binary;"
    )


def select_statement(table_name: TableName, column_names: Iterable[str]) -> str:
    """Return the statement whose description gives the column types of a copy."""
    return f"select {_quoted_columns(column_names)} from {_quoted_table(table_name)}"