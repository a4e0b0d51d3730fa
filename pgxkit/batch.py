"""Bundling several queries into one round trip and reading their results in order."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple

from pgxkit.logger import LogLevel, log_query_args


class CommandTag(str):
    """The completion tag the server sends for a statement, e.g. ``INSERT 0 1``."""

    @property
    def rows_affected(self) -> int:
        """Return the number of rows the statement affected (its trailing number)."""
        digits = len(self) - len(self.rstrip("0123456789"))
        if digits == 0:
            return 0
        return int(self[len(self) - digits:])


@dataclass(frozen=True)
class _BatchItem:
    query: str
    arguments: Tuple[Any, ...]


@dataclass
class Batch:
    """Queries bundled together to avoid unnecessary network round trips."""

    items: List[_BatchItem] = field(default_factory=list)

    def queue(self, query: str, *args: Any) -> None:
        """Queue ``query``, an SQL string or the name of a prepared statement."""
        self.items.append(_BatchItem(query=query, arguments=tuple(args)))

    def __len__(self) -> int:
        return len(self.items)


class BatchClosedError(RuntimeError):
    """Raised when results are read from a batch that has been closed."""

    def __init__(self, message: str = "batch already closed") -> None:
        super().__init__(message)


class ResultReader(Protocol):
    """The result of one statement of a batch."""

    def close(self) -> CommandTag:
        """Discard remaining rows and return the command tag; raises on server error."""


class MultiResultReader(Protocol):
    """The stream of results the server sends for a batch."""

    def next_result(self) -> Optional[ResultReader]:
        """Return the next result, or ``None`` when there are no more."""

    def close(self) -> None:
        """Read and discard all remaining results; raises the first error seen."""


class BatchResults:
    """Reads the results of a sent batch, one statement at a time.

    Must be closed before the connection is used again. If ``error`` is given
    the batch could not be sent and every operation raises it.
    """

    def __init__(
        self,
        reader: Optional[MultiResultReader],
        batch: Optional[Batch] = None,
        *,
        ctx: Any = None,
        logger: Any = None,
        log_level: LogLevel = LogLevel.INFO,
        pid: int = 0,
        error: Optional[BaseException] = None,
    ) -> None:
        if reader is None and error is None:
            raise ValueError("a result reader or an error is required")
        self._reader = reader
        self._batch = batch
        self._ctx = ctx
        self._logger = logger
        self._log_level = log_level
        self._pid = pid
        self._error = error
        self._index = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether :meth:`close` has been called."""
        return self._closed

    def _should_log(self, level: LogLevel) -> bool:
        return self._logger is not None and self._log_level >= level

    def _log(self, level: LogLevel, msg: str, data: Mapping[str, Any]) -> None:
        if not self._should_log(level):
            return
        record: Dict[str, Any] = dict(data)
        if self._pid:
            record["pid"] = self._pid
        self._logger.log(self._ctx, level, msg, record)

    def _next_query(self) -> Optional[_BatchItem]:
        if self._batch is not None and self._index < len(self._batch.items):
            item = self._batch.items[self._index]
            self._index += 1
            return item
        return None

    def exec(self) -> CommandTag:
        """Read the result of the next statement as if it had been run on its own."""
        if self._error is not None:
            raise self._error
        if self._closed:
            raise BatchClosedError()
        assert self._reader is not None

        item = self._next_query()
        query = item.query if item is not None else ""
        args = log_query_args(item.arguments) if item is not None else []

        result = self._reader.next_result()
        if result is None:
            try:
                self._reader.close()
            except Exception as exc:
                err: BaseException = exc
            else:
                err = RuntimeError("no result")
            self._log(
                LogLevel.ERROR, "BatchResult.Exec", {"sql": query, "args": args, "err": err}
            )
            raise err

        try:
            tag = CommandTag(result.close())
        except Exception as exc:
            self._log(
                LogLevel.ERROR, "BatchResult.Exec", {"sql": query, "args": args, "err": exc}
            )
            raise

        self._log(
            LogLevel.INFO,
            "BatchResult.Exec",
            {"sql": query, "args": args, "commandTag": tag},
        )
        return tag

    def close(self) -> None:
        """Finish the batch; safe to call more than once.

        Statements whose results were never read are logged here.
        """
        if self._error is not None:
            raise self._error
        if self._closed:
            return
        self._closed = True

        while (item := self._next_query()) is not None:
            self._log(
                LogLevel.INFO,
                "BatchResult.Close",
                {"sql": item.query, "args": log_query_args(item.arguments)},
            )

        assert self._reader is not None
        self._reader.close()

    def __enter__(self) -> "BatchResults":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()