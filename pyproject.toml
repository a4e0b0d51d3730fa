[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pgxkit"
version = "0.1.0"
description = "Client-side building blocks for PostgreSQL: SQL sanitizing, identifier quoting, config parsing, batch results, copy sources, large objects and logging."
requires-python = ">=3.10"
dependencies = []
keywords = ["postgresql", "sql", "database", "sanitize", "copy", "large objects", "logging"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Front-Ends",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pgxkit"]

[tool.pytest.ini_options]
addopts = "-ra"
