"""
Shared pytest fixtures for the sentiment console test suite.

This module provides fixtures that are automatically available to all test files:
- Deterministic translator stubs for the request loop
- Renderers writing to in-memory streams
- A clean process environment for configuration tests
"""

import io
from types import SimpleNamespace

import pytest

from sentiment_console.console.cancellation import CancellationToken
from sentiment_console.console.output import ResponseRenderer
from tests.stubs import TableTranslator

# Every environment variable the configuration layer reads.
CONFIG_ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_ENDPOINT",
    "OPENAI_MODEL",
    "OPENAI_ORGANIZATION",
    "AZURE_OPENAI_API_KEY",
    "AZURE_OPENAI_ENDPOINT",
    "OLLAMA_BASE_URL",
    "OLLAMA_MODEL",
    "SENTIMENT_PROVIDER",
    "SENTIMENT_TIMEOUT",
    "SENTIMENT_LOG_LEVEL",
)

# ============================================================================
# REQUEST LOOP FIXTURES
# ============================================================================


@pytest.fixture
def translator() -> TableTranslator:
    """Deterministic translator backed by ``tests.stubs.SENTIMENTS``."""
    return TableTranslator()


@pytest.fixture
def token() -> CancellationToken:
    return CancellationToken()


@pytest.fixture
def sinks() -> SimpleNamespace:
    """In-memory output and error streams plus a renderer writing to them."""
    out = io.StringIO()
    err = io.StringIO()
    return SimpleNamespace(out=out, err=err, renderer=ResponseRenderer(out=out, err=err))


# ============================================================================
# CONFIGURATION FIXTURES
# ============================================================================


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """
    Remove every configuration variable and hide the repository INI files.

    Tests that use this fixture see only built-in defaults plus whatever
    they set themselves.
    """
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("sentiment_console.config.CONFIG_FILE", tmp_path / "missing.ini")
    monkeypatch.setattr("sentiment_console.config.CONFIG_EXAMPLE", tmp_path / "missing.example.ini")
    return monkeypatch
