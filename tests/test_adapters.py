import io
import logging

from pgxkit.adapters import JsonLogger, StdlibLogger, TestingLogger
from pgxkit.logger import LogLevel


class _Handler(logging.Handler):
    def __init__(self):
        super().__init__(logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


def _std_logger(name):
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.handlers = [_Handler()]
    return logger


def _records(logger):
    return logger.handlers[0].records


def test_json_default():
    buf = io.StringIO()
    JsonLogger(buf).log(None, LogLevel.INFO, "hello", {"one": "two"})
    assert buf.getvalue() == '{"level":"info","module":"pgx","one":"two","message":"hello"}\n'


def test_json_disable_module():
    buf = io.StringIO()
    JsonLogger(buf, include_module=False).log(None, LogLevel.INFO, "hello", None)
    assert buf.getvalue() == '{"level":"info","message":"hello"}\n'


def test_json_from_context():
    buf = io.StringIO()
    logger = JsonLogger(from_context=True)
    logger.log({JsonLogger.CONTEXT_KEY: buf}, LogLevel.INFO, "hello", {"one": "two"})
    assert buf.getvalue() == '{"level":"info","module":"pgx","one":"two","message":"hello"}\n'


def test_json_from_context_without_stream_writes_nothing():
    buf = io.StringIO()
    logger = JsonLogger(buf, from_context=True)
    logger.log({}, LogLevel.INFO, "hello", None)
    assert buf.getvalue() == ""


def _request_logger(buf):
    def add_request_id(ctx, fields):
        if isinstance(ctx, dict) and isinstance(ctx.get("req"), str):
            fields["req_id"] = ctx["req"]
        return fields

    return JsonLogger(buf, context_func=add_request_id)


def test_json_no_request_id():
    buf = io.StringIO()
    _request_logger(buf).log({}, LogLevel.INFO, "hello", None)
    assert buf.getvalue() == '{"level":"info","module":"pgx","message":"hello"}\n'


def test_json_with_request_id():
    buf = io.StringIO()
    _request_logger(buf).log({"req": "1"}, LogLevel.INFO, "hello", {"two": "2"})
    assert buf.getvalue() == '{"level":"info","module":"pgx","req_id":"1","two":"2","message":"hello"}\n'


def test_json_level_names():
    buf = io.StringIO()
    logger = JsonLogger(buf, include_module=False)
    logger.log(None, LogLevel.ERROR, "a", None)
    logger.log(None, LogLevel.WARN, "b", None)
    logger.log(None, LogLevel.TRACE, "c", None)
    logger.log(None, LogLevel.NONE, "d", None)
    assert buf.getvalue().splitlines() == [
        '{"level":"error","message":"a"}',
        '{"level":"warn","message":"b"}',
        '{"level":"debug","message":"c"}',
        '{"message":"d"}',
    ]


def test_json_data_keys_sorted():
    buf = io.StringIO()
    JsonLogger(buf, include_module=False).log(None, LogLevel.INFO, "m", {"b": 1, "a": 2})
    assert buf.getvalue() == '{"level":"info","a":2,"b":1,"message":"m"}\n'


def test_stdlib_info():
    logger = _std_logger("pgxkit.test.info")
    StdlibLogger(logger).log(None, LogLevel.INFO, "Exec", {"sql": "select 1"})
    records = _records(logger)
    assert len(records) == 1
    assert records[0].levelno == logging.INFO
    assert records[0].getMessage() == "Exec"
    assert records[0].pgx_data == {"sql": "select 1"}


def test_stdlib_trace_and_invalid():
    logger = _std_logger("pgxkit.test.trace")
    adapter = StdlibLogger(logger)
    adapter.log(None, LogLevel.TRACE, "t", None)
    adapter.log(None, 42, "bad", {"x": 1})
    records = _records(logger)
    assert len(records) == 2
    assert records[0].levelno == logging.DEBUG
    assert records[0].pgx_data == {"PGX_LOG_LEVEL": LogLevel.TRACE}
    assert records[1].levelno == logging.ERROR
    assert records[1].pgx_data == {"x": 1, "INVALID_PGX_LOG_LEVEL": 42}


def test_stdlib_warn_maps_to_warning():
    logger = _std_logger("pgxkit.test.warn")
    StdlibLogger(logger).log(None, LogLevel.WARN, "w", {"args": [1]})
    records = _records(logger)
    assert records[0].levelno == logging.WARNING
    assert records[0].pgx_data == {"args": [1]}


class _Recorder:
    def __init__(self):
        self.calls = []

    def log(self, *args):
        self.calls.append(args)


def test_testing_logger_formats_pairs():
    recorder = _Recorder()
    TestingLogger(recorder).log(None, LogLevel.INFO, "Exec", {"sql": "select 1", "pid": 7})
    assert recorder.calls == [(LogLevel.INFO, "Exec", "sql=select 1", "pid=7")]
    assert str(recorder.calls[0][0]) == "info"


def test_testing_logger_without_data():
    recorder = _Recorder()
    TestingLogger(recorder).log(None, LogLevel.ERROR, "boom", None)
    assert recorder.calls == [(LogLevel.ERROR, "boom")]