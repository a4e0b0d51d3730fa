"""Log levels, the logger interface and argument formatting for query logs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence


class InvalidLogLevelError(ValueError):
    """Raised when a string does not name a log level."""

    def __init__(self, message: str = "invalid log level") -> None:
        super().__init__(message)


class LogLevel(IntEnum):
    """Logging verbosity; higher values log more."""

    TRACE = 6
    DEBUG = 5
    INFO = 4
    WARN = 3
    ERROR = 2
    NONE = 1

    def __str__(self) -> str:
        return self.name.lower()


class Logger(Protocol):
    """Anything that can receive log records."""

    def log(
        self,
        ctx: Any,
        level: LogLevel,
        msg: str,
        data: Optional[Mapping[str, Any]],
    ) -> None:
        ...


@dataclass(frozen=True)
class LoggerFunc:
    """Adapts a plain function to the logger interface."""

    func: Callable[[Any, LogLevel, str, Optional[Mapping[str, Any]]], None]

    def log(
        self,
        ctx: Any,
        level: LogLevel,
        msg: str,
        data: Optional[Mapping[str, Any]],
    ) -> None:
        """Delegate the record to the wrapped function."""
        self.func(ctx, level, msg, data)


_LEVELS_BY_NAME: Dict[str, LogLevel] = {str(level): level for level in LogLevel}


def log_level_from_string(s: str) -> LogLevel:
    """Return the level named by ``s`` (trace, debug, info, warn, error, none)."""
    try:
        return _LEVELS_BY_NAME[s]
    except KeyError:
        raise InvalidLogLevelError() from None


_MAX_LOGGED = 64


def _log_arg(arg: Any) -> Any:
    if isinstance(arg, (bytes, bytearray)):
        if len(arg) < _MAX_LOGGED:
            return bytes(arg).hex()
        return f"{bytes(arg[:_MAX_LOGGED]).hex()} (truncated {len(arg) - _MAX_LOGGED} bytes)"
    if isinstance(arg, str):
        encoded = arg.encode("utf-8")
        if len(encoded) > _MAX_LOGGED:
            head = encoded[:_MAX_LOGGED].decode("utf-8", errors="ignore")
            return f"{head} (truncated {len(encoded) - _MAX_LOGGED} bytes)"
    return arg


def log_query_args(args: Sequence[Any]) -> List[Any]:
    """Return query arguments made fit for logging: bytes as hex, long values truncated."""
    return [_log_arg(arg) for arg in args]