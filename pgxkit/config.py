"""Connection configuration parsed from a URL or key/value connection string."""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, unquote, urlsplit

from pgxkit.logger import LogLevel

DEFAULT_STATEMENT_CACHE_CAPACITY = 512
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 5432

# Settings that configure the connection itself rather than the server session.
_CONNECTION_KEYS = frozenset(
    {
        "sslmode",
        "sslkey",
        "sslcert",
        "sslrootcert",
        "sslpassword",
        "passfile",
        "service",
        "servicefile",
        "target_session_attrs",
        "krbsrvname",
        "krbspn",
        "min_read_buffer_size",
    }
)

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


class ConfigError(ValueError):
    """Raised when a connection string cannot be parsed."""


class StatementCacheMode(Enum):
    """How the automatic statement cache prepares statements."""

    PREPARE = "prepare"
    DESCRIBE = "describe"


@dataclass(frozen=True)
class StatementCacheConfig:
    """Settings for the automatic prepared statement cache."""

    mode: StatementCacheMode = StatementCacheMode.PREPARE
    capacity: int = DEFAULT_STATEMENT_CACHE_CAPACITY


@dataclass
class ConnConfig:
    """All options used to establish a connection.

    ``statement_cache`` of ``None`` disables automatic prepared statements.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    database: str = ""
    user: str = ""
    password: Optional[str] = None
    connect_timeout: Optional[float] = None
    connection_params: Dict[str, str] = field(default_factory=dict)
    runtime_params: Dict[str, str] = field(default_factory=dict)
    logger: Optional[Any] = None
    log_level: LogLevel = LogLevel.INFO
    statement_cache: Optional[StatementCacheConfig] = field(
        default_factory=StatementCacheConfig
    )
    prefer_simple_protocol: bool = False
    disable_nested_transactions: bool = False
    conn_string: str = ""

    def copy(self) -> "ConnConfig":
        """Return a copy whose parameter mappings can be modified independently."""
        return dataclasses.replace(
            self,
            connection_params=dict(self.connection_params),
            runtime_params=dict(self.runtime_params),
        )


def _parse_bool(value: str) -> bool:
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid syntax: {value!r}")


def _parse_int32(value: str) -> int:
    if not _INT_RE.fullmatch(value):
        raise ValueError(f"invalid syntax: {value!r}")
    number = int(value)
    if not _INT32_MIN <= number <= _INT32_MAX:
        raise ValueError(f"value out of range: {value!r}")
    return number


def _read_value(s: str, i: int) -> tuple:
    chars = []
    n = len(s)
    if i < n and s[i] == "'":
        i += 1
        while True:
            if i >= n:
                raise ConfigError("unterminated quoted string in connection info string")
            ch = s[i]
            if ch == "\\" and i + 1 < n:
                chars.append(s[i + 1])
                i += 2
                continue
            i += 1
            if ch == "'":
                break
            chars.append(ch)
    else:
        while i < n and not s[i].isspace():
            ch = s[i]
            if ch == "\\" and i + 1 < n:
                chars.append(s[i + 1])
                i += 2
                continue
            chars.append(ch)
            i += 1
    return "".join(chars), i


def _parse_dsn(s: str) -> Dict[str, str]:
    settings: Dict[str, str] = {}
    i, n = 0, len(s)
    while True:
        while i < n and s[i].isspace():
            i += 1
        if i >= n:
            return settings
        eq = s.find("=", i)
        if eq < 0:
            raise ConfigError("invalid dsn: missing '='")
        key = s[i:eq].strip()
        if not key or any(ch.isspace() for ch in key):
            raise ConfigError(f"invalid dsn: bad key {key!r}")
        i = eq + 1
        while i < n and s[i].isspace():
            i += 1
        value, i = _read_value(s, i)
        settings[key] = value


def _parse_url(s: str) -> Dict[str, str]:
    try:
        parts = urlsplit(s)
        port = parts.port
    except ValueError as exc:
        raise ConfigError(f"invalid url: {exc}") from exc

    settings: Dict[str, str] = {}
    if parts.username is not None:
        settings["user"] = unquote(parts.username)
    if parts.password is not None:
        settings["password"] = unquote(parts.password)
    if parts.hostname:
        settings["host"] = unquote(parts.hostname)
    if port is not None:
        settings["port"] = str(port)
    database = unquote(parts.path.lstrip("/"))
    if database:
        settings["database"] = database
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        settings[key] = value
    return settings


def _build_base(settings: Dict[str, str], conn_string: str) -> ConnConfig:
    config = ConnConfig(conn_string=conn_string)
    for key, value in settings.items():
        if key == "host":
            config.host = value or DEFAULT_HOST
        elif key == "port":
            try:
                port = int(value)
            except ValueError:
                raise ConfigError(f"invalid port: {value}") from None
            if not 1 <= port <= 65535:
                raise ConfigError(f"invalid port: {value}")
            config.port = port
        elif key in ("database", "dbname"):
            config.database = value
        elif key == "user":
            config.user = value
        elif key == "password":
            config.password = value
        elif key == "connect_timeout":
            try:
                timeout = float(value)
            except ValueError:
                raise ConfigError(f"invalid connect_timeout: {value}") from None
            if timeout < 0:
                raise ConfigError(f"invalid connect_timeout: {value}")
            config.connect_timeout = timeout
        elif key in _CONNECTION_KEYS:
            config.connection_params[key] = value
        else:
            config.runtime_params[key] = value
    return config


def parse_config(conn_string: str) -> ConnConfig:
    """Build a :class:`ConnConfig` from a URL or key/value connection string.

    Besides the connection settings it takes ``statement_cache_capacity``
    (0 disables the cache, default 512), ``statement_cache_mode``
    ("prepare" or "describe"), ``prefer_simple_protocol`` and
    ``disable_nested_transactions``; these are removed from the runtime
    parameters.
    """
    if conn_string.startswith(("postgres://", "postgresql://")):
        settings = _parse_url(conn_string)
    else:
        settings = _parse_dsn(conn_string)

    config = _build_base(settings, conn_string)
    params = config.runtime_params

    capacity = DEFAULT_STATEMENT_CACHE_CAPACITY
    mode = StatementCacheMode.PREPARE

    if "statement_cache_capacity" in params:
        raw = params.pop("statement_cache_capacity")
        try:
            capacity = _parse_int32(raw)
        except ValueError as exc:
            raise ConfigError(f"cannot parse statement_cache_capacity: {exc}") from exc

    if "statement_cache_mode" in params:
        raw = params.pop("statement_cache_mode")
        try:
            mode = StatementCacheMode(raw)
        except ValueError:
            raise ConfigError(f"invalid statement_cache_mode: {raw}") from None

    config.statement_cache = (
        StatementCacheConfig(mode=mode, capacity=capacity) if capacity > 0 else None
    )

    if "prefer_simple_protocol" in params:
        raw = params.pop("prefer_simple_protocol")
        try:
            config.prefer_simple_protocol = _parse_bool(raw)
        except ValueError as exc:
            raise ConfigError(f"invalid prefer_simple_protocol: {exc}") from exc

    if "disable_nested_transactions" in params:
        raw = params.pop("disable_nested_transactions")
        try:
            config.disable_nested_transactions = _parse_bool(raw)
        except ValueError as exc:
            raise ConfigError(f"invalid disable_nested_transactions: {exc}") from exc

    return config