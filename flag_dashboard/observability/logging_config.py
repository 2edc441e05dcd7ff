"""
Centralized logging configuration with structured JSON logging.

Provides consistent logging across the dashboard, the development
backend and the CLI with:
- JSON structured output
- Correlation ID tracking
- Log rotation
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional
from pythonjsonlogger import jsonlogger

from .context import get_correlation_id

# Extra fields copied onto JSON records when a log call provides them
FLAG_FIELDS = (
    'flag_name',
    'operation',
    'method',
    'path',
    'status_code',
    'duration_ms',
)


class CorrelationIdFilter(logging.Filter):
    """Injects the current correlation ID into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        correlation_id = get_correlation_id()
        record.correlation_id = correlation_id if correlation_id else 'none'
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter for structured logging.

    Emits timestamp, level, component and correlation_id on every line.
    """

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        if not log_record.get('timestamp'):
            log_record['timestamp'] = self.formatTime(record, self.datefmt)

        log_record['level'] = record.levelname
        log_record['component'] = record.name

        if not log_record.get('correlation_id'):
            log_record['correlation_id'] = getattr(record, 'correlation_id', 'none')

        for field_name in FLAG_FIELDS:
            if field_name not in log_record and hasattr(record, field_name):
                log_record[field_name] = getattr(record, field_name)


def setup_logging(
    log_level: str = 'INFO',
    log_format: str = 'json',
    log_dir: Optional[str] = None,
    enable_console: bool = True,
    enable_file: bool = True
) -> None:
    """
    Setup centralized logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format ('json' or 'text')
        log_dir: Directory for log files (default: data/logs)
        enable_console: Whether to log to console
        enable_file: Whether to log to files

    Example:
        setup_logging(log_level='DEBUG', log_format='text')
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    if log_dir is None:
        log_dir = os.path.join('data', 'logs')
    if enable_file:
        Path(log_dir).mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            handler.close()

    correlation_filter = CorrelationIdFilter()

    if log_format == 'json':
        formatter = CustomJsonFormatter(
            '%(timestamp)s %(level)s %(component)s %(correlation_id)s %(message)s',
            datefmt='%Y-%m-%dT%H:%M:%S'
        )
    else:
        formatter = logging.Formatter(
            '%(asctime)s [%(correlation_id)s] %(levelname)-8s [%(name)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(correlation_filter)
        root_logger.addHandler(console_handler)

    if enable_file:
        main_file_handler = logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, 'app.log'),
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=7
        )
        main_file_handler.setLevel(numeric_level)
        main_file_handler.setFormatter(formatter)
        main_file_handler.addFilter(correlation_filter)
        root_logger.addHandler(main_file_handler)

        error_file_handler = logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, 'error.log'),
            maxBytes=10 * 1024 * 1024,
            backupCount=7
        )
        error_file_handler.setLevel(logging.ERROR)
        error_file_handler.setFormatter(formatter)
        error_file_handler.addFilter(correlation_filter)
        root_logger.addHandler(error_file_handler)

    # Quiet noisy libraries
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)
    logging.getLogger('werkzeug').setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(
        "Logging initialized",
        extra={
            'log_level': log_level,
            'log_format': log_format,
            'log_dir': log_dir,
            'console_enabled': enable_console,
            'file_enabled': enable_file
        }
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a component.

    Example:
        logger = get_logger(__name__)
        logger.info("Flag toggled", extra={'flag_name': name})
    """
    return logging.getLogger(name)
