"""Quoting of PostgreSQL identifiers."""

from __future__ import annotations

from typing import Iterable, Union


def quote_identifier(s: str) -> str:
    """Quote ``s`` as a single identifier, doubling embedded double quotes."""
    return '"' + s.replace('"', '""') + '"'


class Identifier(tuple):
    """A possibly qualified identifier such as ``("schema", "table")``."""

    def __new__(cls, parts: Union[str, Iterable[str]] = ()) -> "Identifier":
        if isinstance(parts, str):
            parts = (parts,)
        return super().__new__(cls, parts)

    def sanitize(self) -> str:
        """Return the identifier quoted and safe for SQL interpolation."""
        return ".".join(quote_identifier(part.replace("\x00", "")) for part in self)