"""Client-side building blocks for PostgreSQL: SQL sanitizing, identifier quoting, config parsing, batch results, copy sources, large objects and logging."""

__version__ = "0.1.0"