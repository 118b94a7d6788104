"""Tests for JSON logging configuration"""
import json
import logging

import pytest

from apnsgate.core.logging_config import SanitizingFilter, setup_logging


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def read_records(path):
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


class TestSetupLogging:
    """Test setup_logging output"""

    def test_json_file_output(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "apns.log"
        setup_logging(log_level="DEBUG", log_file=str(log_file))

        logging.getLogger("apnsgate.services.push.apns_client").warning(
            "APNS notification rejected",
            extra={"status_code": 410, "reason": "Unregistered"},
        )

        records = read_records(log_file)
        assert len(records) == 1
        record = records[0]
        assert record["message"] == "APNS notification rejected"
        assert record["level"] == "WARNING"
        assert record["logger"] == "apnsgate.services.push.apns_client"
        assert record["status_code"] == 410
        assert record["reason"] == "Unregistered"
        assert "timestamp" in record

    def test_log_level_applied(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "apns.log"
        setup_logging(log_level="WARNING", log_file=str(log_file))

        logging.getLogger("apnsgate").info("not written")

        assert read_records(log_file) == []
        assert logging.getLogger().level == logging.WARNING

    def test_transport_loggers_quieted(self, restore_root_logger):
        setup_logging(log_level="DEBUG")

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING


class TestSanitizingFilter:
    """Test log injection protection"""

    def test_newlines_removed(self):
        record = logging.LogRecord(
            "test", logging.INFO, __file__, 1, "line1\nline2\r\nline3 %s", ("a\nb",), None
        )

        SanitizingFilter().filter(record)

        assert record.getMessage() == "line1 line2 line3 a b"
