"""Sentiment Console: natural language in, typed sentiment out.

An interactive command-line client that reads one line of free-form text
at a time, asks a remote completion model to translate it into a
``{"sentiment": ...}`` object, validates that object against a pydantic
schema, and prints the result.

Version Management
------------------
``__version__`` is read from the installed package metadata at import time.
The single source of truth is the ``version`` field in ``pyproject.toml``.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ---------------------------------------------------------------------------
# Package version, read from pyproject.toml via importlib.metadata.
#
# Falls back to the literal below when the package is imported from a
# source checkout without being installed.
# ---------------------------------------------------------------------------
try:
    __version__: str = version("sentiment-console")
except PackageNotFoundError:
    __version__ = "0.1.0"
