"""
Centralized Logging Configuration

Provides production-ready logging with:
- Configurable log levels
- Automatic log rotation
- Optional client id masking for shared log sinks
"""

import logging
import logging.handlers
import re
from pathlib import Path
from typing import Pattern

import config


class ClientIdentifierMaskingFilter(logging.Filter):
    """
    Logging filter that masks client identifiers in log records.

    Trace events carry fields like `client_id=42`; when logs leave the
    service boundary these are replaced with [REDACTED_CLIENT_ID].
    """

    PATTERNS: list[tuple[Pattern, str]] = [
        (re.compile(r'(client[_-]?id["\']?\s*[:=]\s*["\']?)(\d+)(["\']?)', re.IGNORECASE), r'\1[REDACTED_CLIENT_ID]\3'),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Filter log record to mask client identifiers.

        Args:
            record: LogRecord to filter

        Returns:
            True (always - we modify but don't block records)
        """
        if record.msg:
            for pattern, replacement in self.PATTERNS:
                record.msg = pattern.sub(replacement, str(record.msg))

        if record.args:
            masked_args = []
            for arg in record.args:
                if isinstance(arg, str):
                    for pattern, replacement in self.PATTERNS:
                        arg = pattern.sub(replacement, arg)
                masked_args.append(arg)
            record.args = tuple(masked_args)

        return True


def setup_logging():
    """
    Initialize centralized logging configuration.

    Call this function once at application startup.

    Configuration:
    - Log level from config.LOG_LEVEL (DEBUG shows per-rule trace events)
    - Automatic rotation every midnight
    - Keeps logs for config.LOG_RETENTION_DAYS days
    - Masks client ids if config.LOG_MASK_CLIENT_IDS is True
    - Writes to <config.LOG_DIR>/discounts.log
    """
    log_dir = Path(getattr(config, "LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    log_level_str = getattr(config, "LOG_LEVEL", "INFO")
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    retention_days = getattr(config, "LOG_RETENTION_DAYS", 7)
    mask_client_ids = getattr(config, "LOG_MASK_CLIENT_IDS", False)

    formatter = logging.Formatter(
        fmt='%(asctime)s | %(name)-25s | %(levelname)-8s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_handler = logging.handlers.TimedRotatingFileHandler(
        filename=log_dir / "discounts.log",
        when="midnight",
        interval=1,
        backupCount=retention_days,
        encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(log_level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    if mask_client_ids:
        file_handler.addFilter(ClientIdentifierMaskingFilter())
        console_handler.addFilter(ClientIdentifierMaskingFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.info(f"Logging initialized: Level={log_level_str}, Retention={retention_days} days, "
                 f"ClientIdMasking={'ENABLED' if mask_client_ids else 'DISABLED'}")
