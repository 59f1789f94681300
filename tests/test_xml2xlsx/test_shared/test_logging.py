"""Tests for correlation-aware logging and progress reporting."""

import logging

from xml2xlsx.shared.logging import (
    CorrelationLogger,
    ProgressReporter,
    configure_logging,
    get_logger,
    new_correlation_id,
)


class TestCorrelationLogger:
    """Test structured extras on log records."""

    def test_extra_fields(self, caplog):
        """Test component and correlation id are attached to records."""
        logger = get_logger("xml2xlsx.test", correlation_id="abc123", component="unit")
        with caplog.at_level(logging.INFO, logger="xml2xlsx.test"):
            logger.info("hello", extra={"rows": 5})
        record = caplog.records[-1]
        assert record.component == "unit"
        assert record.correlation_id == "abc123"
        assert record.rows == 5

    def test_default_component(self):
        """Test component defaults to the last part of the logger name."""
        logger = CorrelationLogger("xml2xlsx.flatten.detector")
        assert logger.component == "detector"

    def test_new_correlation_id(self):
        first, second = new_correlation_id(), new_correlation_id()
        assert len(first) == 12
        assert first != second


class TestConfigureLogging:
    """Test package handler installation."""

    def test_single_handler(self):
        """Test repeated configuration does not stack handlers."""
        configure_logging(logging.INFO)
        configure_logging(logging.DEBUG)
        package_logger = logging.getLogger("xml2xlsx")
        handlers = [h for h in package_logger.handlers if getattr(h, "_xml2xlsx", False)]
        assert len(handlers) == 1
        assert package_logger.level == logging.DEBUG


class TestProgressReporter:
    """Test interval based progress messages."""

    def test_logs_every_interval(self, caplog):
        logger = get_logger("xml2xlsx.progress")
        progress = ProgressReporter(logger, "rows", 10)
        with caplog.at_level(logging.INFO, logger="xml2xlsx.progress"):
            for _ in range(25):
                progress.update()
        messages = [r.getMessage() for r in caplog.records]
        assert messages == ["Processed 10 rows...", "Processed 20 rows..."]

    def test_finish_returns_count(self, caplog):
        logger = get_logger("xml2xlsx.progress")
        progress = ProgressReporter(logger, "registers", 100)
        progress.update(3)
        with caplog.at_level(logging.INFO, logger="xml2xlsx.progress"):
            assert progress.finish() == 3
        assert caplog.records[-1].getMessage() == "Registers: 3 rows"
