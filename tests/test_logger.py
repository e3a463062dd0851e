"""
Tests for logger functionality.
"""

import pytest
from enrollsplit.logger import StructuredLogger, default_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        """Logger should be created with default settings."""
        logger = StructuredLogger(
            name="test",
            level="INFO",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.logger.name == "test"
        assert logger.metrics["rows_read"] == 0

    def test_log_methods(self, tmp_path):
        """All log level methods should work."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        # Should not raise exceptions
        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")
        logger.error("Error message")
        logger.critical("Critical message")

    def test_log_with_context(self, tmp_path):
        """Context is appended as JSON, including non-JSON types."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Message with context", path=tmp_path, count=5)

        log_content = next(tmp_path.glob("*.log")).read_text()
        assert "Message with context | Context:" in log_content
        assert '"count": 5' in log_content

    def test_metrics_tracking(self, tmp_path):
        """Metrics should be tracked correctly."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        for _ in range(3):
            logger.record_row_read()
        logger.record_parsed()
        logger.record_parsed()
        logger.record_skipped("MalformedRecordError")
        logger.record_companies(2)
        logger.record_file_written(4)
        logger.record_file_failure("PermissionError")

        metrics = logger.get_metrics()

        assert metrics["rows_read"] == 3
        assert metrics["records_parsed"] == 2
        assert metrics["rows_skipped"] == 1
        assert metrics["companies"] == 2
        assert metrics["files_written"] == 1
        assert metrics["records_written"] == 4
        assert metrics["files_failed"] == 1
        assert metrics["errors_by_type"] == {"MalformedRecordError": 1, "PermissionError": 1}

    def test_get_metrics_returns_copy(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)

        metrics = logger.get_metrics()
        metrics["errors_by_type"]["Other"] = 1

        assert logger.metrics["errors_by_type"] == {}

    def test_metrics_summary(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)
        logger.record_row_read()
        logger.record_skipped("MalformedRecordError")

        logger.log_metrics_summary()

        log_content = next(tmp_path.glob("*.log")).read_text()
        assert "=== Enrollment Split Metrics ===" in log_content
        assert "Rows: 0/1 parsed (1 skipped)" in log_content
        assert "MalformedRecordError: 1" in log_content

    def test_log_file_creation(self, tmp_path):
        """Log file should be created in specified directory."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Test message")

        # Check that a log file was created
        log_files = list(tmp_path.glob("*.log"))
        assert len(log_files) == 1
        assert log_files[0].name.startswith("enrollsplit_")

        # Check that message was written
        log_content = log_files[0].read_text()
        assert "Test message" in log_content

    def test_invalid_level(self):
        with pytest.raises(AttributeError):
            StructuredLogger(name="test", level="LOUD", enable_file=False, enable_console=False)


class TestDefaultLogger:
    """Test the fallback logger used when no logger is passed."""

    def test_each_call_is_a_new_instance(self):
        """default_logger should never hand back a shared instance."""
        logger1 = default_logger()
        logger2 = default_logger()

        assert logger1 is not logger2

    def test_metrics_start_at_zero(self):
        """Counters from one run must not leak into the next."""
        logger1 = default_logger()
        logger1.record_row_read()
        logger1.record_file_failure("OSError")

        logger2 = default_logger()

        assert logger2.get_metrics()["rows_read"] == 0
        assert logger2.get_metrics()["files_failed"] == 0
        assert logger2.get_metrics()["errors_by_type"] == {}

    def test_no_log_file(self, tmp_path, monkeypatch):
        """default_logger should only log to the console."""
        monkeypatch.chdir(tmp_path)
        default_logger().info("hello")

        assert not (tmp_path / "logs").exists()
