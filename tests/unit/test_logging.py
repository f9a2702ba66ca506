"""
Unit tests for logging module.
"""

import logging
import sys

from docs_server.core.logging import (
    DocsServerFormatter,
    StructuredLogger,
    get_logger,
    setup_logging,
)


def make_record(level=logging.INFO, msg="Fetched listing", exc_info=None):
    return logging.LogRecord(
        name="docs_server.core.github",
        level=level,
        pathname="github.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


class TestDocsServerFormatter:
    """Test custom formatter."""

    def test_format_basic_log(self):
        """Test basic log formatting."""
        result = DocsServerFormatter().format(make_record())

        assert "ℹ️" in result
        assert "docs_server.core.github: Fetched listing" in result

    def test_format_with_extra_data(self):
        """Keyword extras render as key=value pairs."""
        record = make_record()
        record.extra_data = {"repo": "pmndrs/drei", "entries": 12}

        result = DocsServerFormatter().format(record)

        assert "(repo=pmndrs/drei, entries=12)" in result

    def test_format_level_emoji(self):
        result = DocsServerFormatter().format(make_record(level=logging.WARNING))
        assert "⚠️" in result

    def test_format_exception(self):
        try:
            raise ValueError("bad payload")
        except ValueError:
            record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

        result = DocsServerFormatter().format(record)

        assert "ValueError: bad payload" in result


class TestStructuredLogger:
    """Test structured logger."""

    def test_logger_creation(self):
        """Test logger creation."""
        logger = StructuredLogger("docs_server.test")
        assert logger.logger.name == "docs_server.test"

    def test_extras_reach_record(self, caplog):
        """Keyword arguments travel on the record as extra_data."""
        logger = StructuredLogger("docs_server.test")

        with caplog.at_level(logging.INFO, logger="docs_server.test"):
            logger.info("Analyzed repository", repo="owner/repo", file_types=3)

        record = caplog.records[-1]
        assert record.getMessage() == "Analyzed repository"
        assert record.extra_data == {"repo": "owner/repo", "file_types": 3}

    def test_disabled_level_is_skipped(self, caplog):
        logger = StructuredLogger("docs_server.quiet")

        with caplog.at_level(logging.WARNING, logger="docs_server.quiet"):
            logger.debug("Skipping unreadable subtree", path="src")

        assert caplog.records == []

    def test_error_with_exc_info(self, caplog):
        logger = StructuredLogger("docs_server.test")

        with caplog.at_level(logging.ERROR, logger="docs_server.test"):
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                logger.error("Tool execution failed", exc_info=True, tool="get-doc")

        record = caplog.records[-1]
        assert record.exc_info is not None
        assert record.extra_data == {"tool": "get-doc"}

    def test_other_levels(self):
        """Test remaining levels do not raise."""
        logger = StructuredLogger("docs_server.test")
        logger.warning("Error reading local doc", path="a.md")
        logger.critical("Test critical", severity="high")


class TestLoggingSetup:
    """Test logging setup functions."""

    def test_get_logger(self):
        """Test getting a logger."""
        logger = get_logger("docs_server.module")
        assert isinstance(logger, StructuredLogger)

    def test_setup_logging_writes_to_stderr(self):
        """Stdout is reserved for the MCP protocol."""
        setup_logging("INFO")

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert handlers[0].stream is sys.stderr
        assert isinstance(handlers[0].formatter, DocsServerFormatter)

    def test_setup_logging_quiets_httpx(self):
        setup_logging("DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_setup_logging_with_file(self, tmp_path):
        """Test logging setup with file."""
        log_file = tmp_path / "logs" / "server.log"
        setup_logging("DEBUG", log_file)

        logging.getLogger("docs_server.test").info("Written to file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "Written to file" in log_file.read_text()

    def test_setup_logging_levels(self):
        """Test different log levels."""
        for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            setup_logging(level)
            root_logger = logging.getLogger()
            assert root_logger.level == getattr(logging, level)
