import pytest

from pgxkit.logger import (
    InvalidLogLevelError,
    LogLevel,
    LoggerFunc,
    log_level_from_string,
    log_query_args,
)


@pytest.mark.parametrize("name", ["trace", "debug", "info", "warn", "error", "none"])
def test_level_name_round_trip(name):
    level = log_level_from_string(name)
    assert str(level) == name


def test_every_level_round_trips():
    for level in LogLevel:
        assert log_level_from_string(str(level)) is level


def test_levels_order_by_verbosity():
    assert log_level_from_string("trace") > log_level_from_string("debug")
    assert log_level_from_string("error") > log_level_from_string("none")


@pytest.mark.parametrize("name", ["", "INFO", "verbose"])
def test_invalid_level(name):
    with pytest.raises(InvalidLogLevelError, match="invalid log level"):
        log_level_from_string(name)


def test_logger_func_delegates():
    calls = []
    logger = LoggerFunc(lambda ctx, level, msg, data: calls.append((ctx, level, msg, data)))
    logger.log("ctx", LogLevel.INFO, "Exec", {"sql": "select 1"})
    assert calls == [("ctx", LogLevel.INFO, "Exec", {"sql": "select 1"})]


def test_short_bytes_logged_as_hex():
    data = bytes(range(10))
    (logged,) = log_query_args([data])
    assert bytes.fromhex(logged) == data


def test_long_bytes_truncated():
    data = bytes(range(100))
    (logged,) = log_query_args([data])
    assert logged.startswith(data[:64].hex())
    assert logged.endswith("(truncated 36 bytes)")


def test_string_at_limit_unchanged():
    text = "x" * 64
    assert log_query_args([text]) == [text]


def test_long_string_truncated():
    text = "y" * 65
    assert log_query_args([text]) == ["y" * 64 + " (truncated 1 bytes)"]


def test_other_values_pass_through():
    args = [1, None, 2.5, True]
    assert log_query_args(args) == args