# pgxkit

Client-side building blocks for working with PostgreSQL from Python. The package
uses only the standard library.

## What is inside

- `pgxkit.sanitize`: `new_query` splits SQL into literal text and `$n`
  placeholders. It leaves alone placeholders that sit inside quoted strings,
  quoted identifiers, `E'...'` escape strings, `--` comments and nested `/* */`
  comments. `Query.sanitize` and `sanitize_sql` put the arguments in.
  Accepted argument types are `None`, `bool`, `int`, `float`, `bytes`/`bytearray`,
  `str` and `datetime`. Any other type, too few arguments or an unused argument
  raises `SanitizeError`. `quote_string` and `quote_bytes` quote single values.
  Sanitizing is only safe when the server runs with `standard_conforming_strings`
  on.
- `pgxkit.identifier`: `Identifier` is a tuple of name parts, such as
  `("schema", "table")`. `Identifier.sanitize()` quotes each part, drops NUL
  characters and joins the parts with dots. `quote_identifier` quotes a single
  name.
- `pgxkit.config`: `parse_config` reads a `postgres://` or `postgresql://` URL,
  or a `key=value` connection string, into a `ConnConfig`. On top of host, port,
  database, user, password and `connect_timeout`, it handles these keys and
  removes them from `runtime_params`:
  - `statement_cache_capacity`: 0 disables the cache; the default is 512.
  - `statement_cache_mode`: `prepare` or `describe`.
  - `prefer_simple_protocol`
  - `disable_nested_transactions`

  `ConnConfig.statement_cache` is a `StatementCacheConfig`, or `None` when the
  cache is disabled. `ConnConfig.copy()` returns an independent copy. Bad values
  raise `ConfigError`.
- `pgxkit.logger`: provides the following.
  - `LogLevel`, ordered from `NONE` to `TRACE`.
  - `log_level_from_string`, which raises `InvalidLogLevelError` for an unknown
    name.
  - `LoggerFunc`, which wraps a plain function as a logger.
  - `log_query_args`, which turns `bytes` arguments into hex and truncates
    values longer than 64 bytes.
- `pgxkit.adapters`: loggers for common back ends.
  - `StdlibLogger` forwards to a `logging.Logger`. The record data goes into the
    `pgx_data` attribute.
  - `TestingLogger` calls `target.log(level, msg, "key=value", ...)`.
  - `JsonLogger` writes one compact JSON object per line. It takes these
    options: `context_func`, `include_module` and `from_context`. With
    `from_context`, the stream is read from `ctx["pgx_log_stream"]`.
- `pgxkit.params`: `Valuer` is an abstract base class for values that supply
  their own database representation. `call_valuer_value` calls it.
  `convert_driver_valuers` replaces the valuers in an argument list with their
  values.
- `pgxkit.batch`: the following classes.
  - `Batch` queues statements with `queue(query, *args)`; `len(batch)` counts
    them.
  - `BatchResults` reads the results back in order from a result reader that you
    supply. `exec()` returns a `CommandTag`; its `rows_affected` property gives
    the row count. `close()` logs every statement whose result was never read.
    It can be called more than once and works as a context manager. Reading
    after `close()` raises `BatchClosedError`.
- `pgxkit.copy_source`: `CopyFromRows` and `CopyFromSlice` are iterable row
  sources for bulk copy. `copy_statement` builds the matching
  `copy ... from stdin binary;` statement. `select_statement` builds the query
  that describes the column types.
- `pgxkit.large_objects`: `LargeObjects` provides `create`, `open` and `unlink`.
  `LargeObject` provides `write`, `read`, `seek`, `tell`, `truncate` and `close`.
  Both work through any object that has `fetch_value(sql, *args)` and
  `exec(sql, *args)` methods. `LargeObjectMode` holds the `READ` and `WRITE`
  flags. A failed write or unlink raises `LargeObjectError`.

## Examples

```python
from pgxkit.sanitize import sanitize_sql

sanitize_sql("select * from widgets where name = $1 and id = $2", "o'brien", 42)
# "select * from widgets where name = 'o''brien' and id = 42"
```

```python
from pgxkit.identifier import Identifier

Identifier(["public", 'odd"name']).sanitize()
# '"public"."odd""name"'
```

```python
from pgxkit.config import parse_config

config = parse_config(
    "host=localhost user=user statement_cache_capacity=42 statement_cache_mode=describe"
)
config.statement_cache        # StatementCacheConfig(mode=<StatementCacheMode.DESCRIBE: 'describe'>, capacity=42)
config.prefer_simple_protocol  # False
```

```python
from pgxkit.batch import Batch, CommandTag

batch = Batch()
batch.queue("insert into ledger(description, amount) values($1, $2)", "q1", 1)
batch.queue("select sum(amount) from ledger")
len(batch)                             # 2
CommandTag("INSERT 0 1").rows_affected  # 1
```

```python
from pgxkit.copy_source import copy_statement

copy_statement(["people"], ["first_name", "age"])
# 'copy "people" ( "first_name", "age" ) from stdin binary;'
```

## What the package does not do

pgxkit does not open connections or speak the PostgreSQL wire protocol. It does
not encode values into the binary copy format, and it provides no connection
pool or transaction handling. `BatchResults` and the large-object classes work
on top of reader or query objects that you supply, and the copy helpers only
provide the rows and the SQL.

## Running the tests

```
pip install -e ".[test]"
pytest
```