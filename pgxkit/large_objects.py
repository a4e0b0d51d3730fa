"""Access to the server's large object API within a transaction."""

from __future__ import annotations

from enum import IntFlag
from typing import Any, Optional, Protocol


class LargeObjectError(Exception):
    """Raised when the server reports a failed large object operation."""


class LargeObjectMode(IntFlag):
    """Modes for opening a large object."""

    WRITE = 0x20000
    READ = 0x40000


class Queryer(Protocol):
    """The part of a transaction the large object API needs."""

    def fetch_value(self, sql: str, *args: Any) -> Any:
        """Run ``sql`` and return the first column of its single row."""

    def exec(self, sql: str, *args: Any) -> Any:
        """Run ``sql`` for its effect."""


class LargeObject:
    """An open large object descriptor; valid only in the transaction that opened it."""

    def __init__(self, tx: Queryer, fd: int) -> None:
        self.tx = tx
        self.fd = fd

    def write(self, data: bytes) -> int:
        """Write ``data`` and return the number of bytes written."""
        n = int(self.tx.fetch_value("select lowrite($1, $2)", self.fd, bytes(data)))
        if n < 0:
            raise LargeObjectError("failed to write to large object")
        return n

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; fewer bytes means the end was reached."""
        if size < 0:
            raise ValueError("size must not be negative")
        result: Optional[bytes] = self.tx.fetch_value("select loread($1, $2)", self.fd, size)
        return bytes(result) if result is not None else b""

    def seek(self, offset: int, whence: int = 0) -> int:
        """Move the location pointer and return the new position."""
        return int(self.tx.fetch_value("select lo_lseek64($1, $2, $3)", self.fd, offset, whence))

    def tell(self) -> int:
        """Return the current read or write position."""
        return int(self.tx.fetch_value("select lo_tell64($1)", self.fd))

    def truncate(self, size: int) -> None:
        """Truncate the large object to ``size`` bytes."""
        self.tx.exec("select lo_truncate64($1, $2)", self.fd, size)

    def close(self) -> None:
        """Close the descriptor."""
        self.tx.exec("select lo_close($1)", self.fd)

    def __enter__(self) -> "LargeObject":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()


class LargeObjects:
    """Entry point to the large object API; valid only within its transaction."""

    def __init__(self, tx: Queryer) -> None:
        self.tx = tx

    def create(self, oid: int = 0) -> int:
        """Create a large object; with ``oid`` 0 the server picks an unused OID."""
        return int(self.tx.fetch_value("select lo_create($1)", oid))

    def open(self, oid: int, mode: LargeObjectMode) -> LargeObject:
        """Open an existing large object in ``mode``."""
        fd = self.tx.fetch_value("select lo_open($1, $2)", oid, int(mode))
        return LargeObject(self.tx, int(fd))

    def unlink(self, oid: int) -> None:
        """Remove a large object from the database."""
        result = self.tx.fetch_value("select lo_unlink($1)", oid)
        if result != 1:
            raise LargeObjectError("failed to remove large object")