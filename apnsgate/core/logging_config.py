"""
Structured JSON Logging Configuration

Provides centralized logging configuration with:
- JSON formatted output for machine parsing
- Optional file rotation
- Configurable log levels via environment
"""
import logging
import logging.handlers
import os
import re
from datetime import datetime, timezone
from typing import Optional
from pythonjsonlogger import jsonlogger

from apnsgate.core.config import settings


class SanitizingFilter(logging.Filter):
    """
    Filter that strips line breaks from log messages so one record
    always stays on one line.
    """

    DANGEROUS_PATTERNS = [
        (r'\r\n', ' '),
        (r'\n', ' '),
        (r'\r', ' '),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            for pattern, replacement in self.DANGEROUS_PATTERNS:
                record.msg = re.sub(pattern, replacement, record.msg)

        if record.args and isinstance(record.args, tuple):
            sanitized_args = []
            for arg in record.args:
                if isinstance(arg, str):
                    for pattern, replacement in self.DANGEROUS_PATTERNS:
                        arg = re.sub(pattern, replacement, arg)
                sanitized_args.append(arg)
            record.args = tuple(sanitized_args)

        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter that adds standard fields to all log entries.

    Output format:
    {
        "timestamp": "2025-11-23T10:30:00.000000+00:00",
        "level": "INFO",
        "message": "APNS notification sent",
        "module": "apns_client",
        "logger": "apnsgate.services.push.apns_client",
        ...extra fields...
    }
    """

    def add_fields(
        self,
        log_record: dict,
        record: logging.LogRecord,
        message_dict: dict
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get('timestamp'):
            log_record['timestamp'] = datetime.now(timezone.utc).isoformat()

        log_record['level'] = record.levelname
        log_record['module'] = record.module
        log_record['logger'] = record.name

        if 'message' not in log_record:
            log_record['message'] = record.getMessage()


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure logging with JSON output.

    Args:
        log_level: Override log level (default from settings.LOG_LEVEL)
        log_file: Also write to this rotating file (default settings.LOG_FILE)

    Returns:
        Root logger configured for the application
    """
    level = getattr(logging, (log_level or settings.LOG_LEVEL).upper(), logging.INFO)
    log_file = log_file or settings.LOG_FILE

    json_formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(name)s %(message)s')

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(json_formatter)
    console_handler.addFilter(SanitizingFilter())
    root_logger.addHandler(console_handler)

    if log_file:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        # 10MB per file, 5 backups
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(json_formatter)
        file_handler.addFilter(SanitizingFilter())
        root_logger.addHandler(file_handler)

    # Suppress noisy transport loggers
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('hpack').setLevel(logging.WARNING)

    return root_logger

