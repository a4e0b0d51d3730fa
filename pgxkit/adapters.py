"""Loggers that forward driver log records to other logging back ends."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, TextIO, Union

from pgxkit.logger import LogLevel

ContextFunc = Callable[[Any, Dict[str, Any]], Dict[str, Any]]


def _as_level(level: Union[LogLevel, int]) -> Optional[LogLevel]:
    try:
        return LogLevel(level)
    except ValueError:
        return None


class StdlibLogger:
    """Writes records to a :mod:`logging` logger.

    The record's data is attached to the log record as the ``pgx_data``
    attribute. Trace records are logged at DEBUG with a ``PGX_LOG_LEVEL``
    entry; unknown levels are logged at ERROR with ``INVALID_PGX_LOG_LEVEL``.
    """

    _LEVELS = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARN: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
    }

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger if logger is not None else logging.getLogger("pgxkit")

    def log(
        self,
        ctx: Any,
        level: Union[LogLevel, int],
        msg: str,
        data: Optional[Mapping[str, Any]],
    ) -> None:
        """Forward one record to the wrapped logger."""
        fields: Dict[str, Any] = dict(data or {})
        known = _as_level(level)
        if known is LogLevel.TRACE:
            fields["PGX_LOG_LEVEL"] = known
            std_level = logging.DEBUG
        elif known in self._LEVELS:
            std_level = self._LEVELS[known]
        else:
            fields["INVALID_PGX_LOG_LEVEL"] = known if known is not None else level
            std_level = logging.ERROR
        self.logger.log(std_level, msg, extra={"pgx_data": fields})


class _TestLog(Protocol):
    def log(self, *args: Any) -> None:
        ...


class TestingLogger:
    """Writes records to anything with a ``log(*args)`` method, such as a test recorder.

    Each record is passed as the level, the message and one ``key=value``
    string per data entry.
    """

    __test__ = False

    def __init__(self, target: _TestLog) -> None:
        self.target = target

    def log(
        self,
        ctx: Any,
        level: Union[LogLevel, int],
        msg: str,
        data: Optional[Mapping[str, Any]],
    ) -> None:
        """Forward one record to the wrapped target."""
        known = _as_level(level)
        args = [known if known is not None else level, msg]
        args.extend(f"{key}={value}" for key, value in (data or {}).items())
        self.target.log(*args)


class JsonLogger:
    """Writes each record as one line of compact JSON.

    Fields come in this order: ``level``, ``module`` (unless disabled), fields
    added by ``context_func``, the record's data sorted by key, ``message``.
    With ``from_context`` the output stream is taken from the context mapping
    under :attr:`CONTEXT_KEY`; when it is missing nothing is written.
    """

    CONTEXT_KEY = "pgx_log_stream"

    _LEVEL_NAMES = {
        LogLevel.NONE: None,
        LogLevel.ERROR: "error",
        LogLevel.WARN: "warn",
        LogLevel.INFO: "info",
        LogLevel.DEBUG: "debug",
    }

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        *,
        context_func: Optional[ContextFunc] = None,
        include_module: bool = True,
        from_context: bool = False,
    ) -> None:
        self.stream = stream if stream is not None or from_context else sys.stderr
        self.context_func = context_func
        self.include_module = include_module
        self.from_context = from_context

    def _target(self, ctx: Any) -> Optional[TextIO]:
        if not self.from_context:
            return self.stream
        if isinstance(ctx, Mapping):
            return ctx.get(self.CONTEXT_KEY)
        return None

    def log(
        self,
        ctx: Any,
        level: Union[LogLevel, int],
        msg: str,
        data: Optional[Mapping[str, Any]],
    ) -> None:
        """Write one record as a JSON line."""
        target = self._target(ctx)
        if target is None:
            return

        known = _as_level(level)
        level_name = self._LEVEL_NAMES.get(known, "debug") if known is not None else "debug"

        record: Dict[str, Any] = {}
        if level_name is not None:
            record["level"] = level_name
        if self.include_module and not self.from_context:
            record["module"] = "pgx"
        if self.context_func is not None:
            record = self.context_func(ctx, record)
        if self.include_module and self.from_context:
            record["module"] = "pgx"
        for key in sorted(data or {}):
            record[key] = data[key]  # type: ignore[index]
        record["message"] = msg

        target.write(json.dumps(record, separators=(",", ":"), default=str) + "\n")