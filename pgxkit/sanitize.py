"""Client-side interpolation of arguments into SQL for the simple query protocol.

The functions here are only safe when the server runs with
``standard_conforming_strings`` turned on.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, List, Optional, Union

Part = Union[str, int]
"""A query part: a string is raw SQL, an int is a 1-based placeholder number."""

_State = Optional[Callable[[], "_State"]]


class SanitizeError(ValueError):
    """Raised when arguments cannot be interpolated into a query."""


def quote_string(s: str) -> str:
    """Quote ``s`` as an SQL string literal."""
    return "'" + s.replace("'", "''") + "'"


def quote_bytes(buf: bytes) -> str:
    """Quote ``buf`` as a hex-escaped bytea literal."""
    return "'\\x" + bytes(buf).hex() + "'"


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _format_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d} "
        f"{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    offset = value.utcoffset()
    seconds = int(offset.total_seconds()) if offset is not None else 0
    if seconds == 0:
        text += "Z"
    else:
        sign = "+" if seconds > 0 else "-"
        hours, rest = divmod(abs(seconds), 3600)
        minutes, secs = divmod(rest, 60)
        text += f"{sign}{hours:02d}:{minutes:02d}:{secs:02d}"
    return "'" + text + "'"


def _format_arg(arg: object) -> str:
    if arg is None:
        return "null"
    if isinstance(arg, bool):
        return "true" if arg else "false"
    if isinstance(arg, int):
        return str(arg)
    if isinstance(arg, float):
        return _format_float(arg)
    if isinstance(arg, (bytes, bytearray)):
        return quote_bytes(arg)
    if isinstance(arg, str):
        return quote_string(arg)
    if isinstance(arg, datetime):
        return _format_datetime(arg)
    raise SanitizeError(f"invalid arg type: {type(arg).__name__}")


@dataclass
class Query:
    """A parsed SQL query split into raw SQL and placeholder parts."""

    parts: List[Part] = field(default_factory=list)

    def sanitize(self, *args: object) -> str:
        """Return the SQL with every placeholder replaced by its quoted argument."""
        used = [False] * len(args)
        pieces: List[str] = []
        for part in self.parts:
            if isinstance(part, str):
                pieces.append(part)
            elif isinstance(part, int) and not isinstance(part, bool):
                index = part - 1
                if index < 0:
                    raise SanitizeError(f"invalid placeholder: ${part}")
                if index >= len(args):
                    raise SanitizeError("insufficient arguments")
                pieces.append(_format_arg(args[index]))
                used[index] = True
            else:
                raise SanitizeError(f"invalid Part type: {type(part).__name__}")
        for index, was_used in enumerate(used):
            if not was_used:
                raise SanitizeError(f"unused argument: {index}")
        return "".join(pieces)


class _Lexer:
    """State-machine lexer that finds placeholders outside literals and comments."""

    def __init__(self, src: str) -> None:
        self.src = src
        self.start = 0
        self.pos = 0
        self.nested = 0
        self.parts: List[Part] = []

    def run(self) -> List[Part]:
        state: _State = self._raw
        while state is not None:
            state = state()
        return self.parts

    def _next(self) -> str:
        if self.pos >= len(self.src):
            return ""
        ch = self.src[self.pos]
        self.pos += 1
        return ch

    def _peek(self) -> str:
        return self.src[self.pos] if self.pos < len(self.src) else ""

    def _skip(self) -> None:
        if self.pos < len(self.src):
            self.pos += 1

    def _finish(self) -> _State:
        if self.pos > self.start:
            self.parts.append(self.src[self.start:self.pos])
            self.start = self.pos
        return None

    def _raw(self) -> _State:
        while True:
            ch = self._next()
            if ch in ("e", "E"):
                if self._peek() == "'":
                    self._skip()
                    return self._escape_string
            elif ch == "'":
                return self._single_quote
            elif ch == '"':
                return self._double_quote
            elif ch == "$":
                if "0" <= self._peek() <= "9" and self._peek():
                    raw_end = self.pos - 1
                    if raw_end > self.start:
                        self.parts.append(self.src[self.start:raw_end])
                    self.start = self.pos
                    return self._placeholder
            elif ch == "-":
                if self._peek() == "-":
                    self._skip()
                    return self._line_comment
            elif ch == "/":
                if self._peek() == "*":
                    self._skip()
                    return self._block_comment
            elif ch == "":
                return self._finish()

    def _quoted(self, quote: str) -> _State:
        while True:
            ch = self._next()
            if ch == quote:
                if self._peek() != quote:
                    return self._raw
                self._skip()
            elif ch == "":
                return self._finish()

    def _single_quote(self) -> _State:
        return self._quoted("'")

    def _double_quote(self) -> _State:
        return self._quoted('"')

    def _placeholder(self) -> _State:
        num = 0
        while True:
            ch = self._peek()
            if ch and "0" <= ch <= "9":
                num = num * 10 + int(ch)
                self.pos += 1
            else:
                self.parts.append(num)
                self.start = self.pos
                return self._raw

    def _escape_string(self) -> _State:
        while True:
            ch = self._next()
            if ch == "\\":
                self._skip()
            elif ch == "'":
                if self._peek() != "'":
                    return self._raw
                self._skip()
            elif ch == "":
                return self._finish()

    def _line_comment(self) -> _State:
        while True:
            ch = self._next()
            if ch == "\\":
                self._skip()
            elif ch in ("\n", "\r"):
                return self._raw
            elif ch == "":
                return self._finish()

    def _block_comment(self) -> _State:
        while True:
            ch = self._next()
            if ch == "/":
                if self._peek() == "*":
                    self._skip()
                    self.nested += 1
            elif ch == "*":
                if self._peek() != "/":
                    continue
                self._skip()
                if self.nested == 0:
                    return self._raw
                self.nested -= 1
            elif ch == "":
                return self._finish()


def new_query(sql: str) -> Query:
    """Split ``sql`` into raw SQL parts and placeholder numbers."""
    return Query(parts=_Lexer(sql).run())


def sanitize_sql(sql: str, *args: object) -> str:
    """Replace the placeholders in ``sql`` with quoted and escaped ``args``."""
    return new_query(sql).sanitize(*args)