[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nvrch"
version = "0.1.0"
description = "A small HTTP server answering course catalogue searches from SQLite as JSON, with its own JSON value model and request parser"
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "server", "json", "sqlite", "catalog"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Environment :: No Input/Output (Daemon)",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
nvrch = "nvrch.app:main"

[tool.hatch.build.targets.wheel]
packages = ["nvrch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
