"""Unit tests for logging setup."""

import io
import json
import logging

import pytest

from sentiment_console.config import LoggingSettings
from sentiment_console.logging_config import PACKAGE_LOGGER, configure_logging


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Leave the package logger as we found it."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.mark.unit
class TestConfigureLogging:
    def test_simple_format(self):
        stream = io.StringIO()
        configure_logging(LoggingSettings(level="INFO"), stream=stream)

        logging.getLogger("sentiment_console.translation.model").info("retrying")

        assert stream.getvalue() == "INFO: retrying\n"

    def test_level_filters_records(self):
        stream = io.StringIO()
        configure_logging(LoggingSettings(level="warning"), stream=stream)

        logging.getLogger("sentiment_console.console.app").info("hidden")

        assert stream.getvalue() == ""

    def test_unknown_level_falls_back_to_warning(self):
        logger = configure_logging(LoggingSettings(level="LOUD"), stream=io.StringIO())
        assert logger.level == logging.WARNING

    def test_json_format(self):
        stream = io.StringIO()
        configure_logging(LoggingSettings(level="DEBUG", format="json"), stream=stream)

        logging.getLogger("sentiment_console.config").warning("héllo %s", "world")

        record = json.loads(stream.getvalue())
        assert record["level"] == "WARNING"
        assert record["logger"] == "sentiment_console.config"
        assert record["message"] == "héllo world"

    def test_json_format_includes_traceback(self):
        stream = io.StringIO()
        configure_logging(LoggingSettings(format="json"), stream=stream)

        try:
            raise RuntimeError("boom")
        except RuntimeError:
            logging.getLogger(PACKAGE_LOGGER).exception("failed")

        assert "RuntimeError: boom" in json.loads(stream.getvalue())["exc_info"]

    def test_detailed_format(self):
        stream = io.StringIO()
        configure_logging(LoggingSettings(format="detailed"), stream=stream)

        logging.getLogger("sentiment_console.cli").error("oops")

        assert "ERROR" in stream.getvalue()
        assert "sentiment_console.cli: oops" in stream.getvalue()

    def test_reconfiguring_replaces_handler(self):
        configure_logging(LoggingSettings(), stream=io.StringIO())
        logger = configure_logging(LoggingSettings(), stream=io.StringIO())

        assert len(logger.handlers) == 1
