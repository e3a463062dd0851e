"""
Structured logging for enrollsplit.

Wraps the standard logging module with console and file outputs, keyword
context on every message, and run metrics summarising a split.
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


class StructuredLogger:
    """
    Logger with optional console and file outputs.
    Tracks counters for one enrollment split run.
    """

    def __init__(
        self,
        name: str = "enrollsplit",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()

        self.metrics = {
            "rows_read": 0,
            "records_parsed": 0,
            "rows_skipped": 0,
            "companies": 0,
            "files_written": 0,
            "files_failed": 0,
            "records_written": 0,
            "errors_by_type": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"enrollsplit_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message, stacklevel=3)

    # Metric tracking methods

    def record_row_read(self):
        self.metrics["rows_read"] += 1

    def record_parsed(self):
        self.metrics["records_parsed"] += 1

    def record_skipped(self, error_type: str):
        """Record a malformed row that was skipped instead of aborting the run."""
        self.metrics["rows_skipped"] += 1
        self._count_error(error_type)

    def record_companies(self, count: int):
        self.metrics["companies"] = count

    def record_file_written(self, record_count: int):
        """Record a partition file and the number of rows it holds."""
        self.metrics["files_written"] += 1
        self.metrics["records_written"] += record_count

    def record_file_failure(self, error_type: str):
        self.metrics["files_failed"] += 1
        self._count_error(error_type)

    def _count_error(self, error_type: str):
        if error_type not in self.metrics["errors_by_type"]:
            self.metrics["errors_by_type"][error_type] = 0
        self.metrics["errors_by_type"][error_type] += 1

    def get_metrics(self) -> dict:
        """Return a copy of the current metrics."""
        metrics_copy = self.metrics.copy()
        metrics_copy["errors_by_type"] = dict(self.metrics["errors_by_type"])
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Enrollment Split Metrics ===")
        self.info(f"Rows: {metrics['records_parsed']}/{metrics['rows_read']} parsed ({metrics['rows_skipped']} skipped)")
        self.info(f"Companies: {metrics['companies']}")
        self.info(f"Files: {metrics['files_written']} written, {metrics['files_failed']} failed")
        self.info(f"Records written: {metrics['records_written']}")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


def default_logger(name: str = "enrollsplit", level: str = "INFO") -> StructuredLogger:
    """
    Fresh console-only logger for callers that did not pass one.

    Each call starts with zeroed metrics, so separate runs never share counters.
    """
    return StructuredLogger(name=name, level=level, enable_file=False)
