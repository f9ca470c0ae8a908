"""Logging configuration for EVE Settings Manager.

Provides centralized logging that keeps local user names out of log
files. Profile paths live under the user's home directory, so every
path written to a log would otherwise carry the account name.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Optional


APP_LOGGER_NAME = "eve_settings"

# Home directory patterns to redact from logs
USER_PATH_PATTERNS = [
    (re.compile(r'([A-Za-z]:\\+Users\\+)[^\\/\s]+', re.IGNORECASE), r'\1[USER]'),
    (re.compile(r'(/Users/)[^/\s]+'), r'\1[USER]'),
    (re.compile(r'(/home/)[^/\s]+'), r'\1[USER]'),
]


class UserPathRedactingFormatter(logging.Formatter):
    """Custom formatter that redacts user names from paths."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record, redacting home directory names."""
        message = super().format(record)
        for pattern, replacement in USER_PATH_PATTERNS:
            message = pattern.sub(replacement, message)
        return message


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    console: bool = True
) -> logging.Logger:
    """
    Configure application logging with path redaction.

    Args:
        level: Logging level (default INFO)
        log_file: Optional file path for log output
        console: Whether to output to console (default True)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(level)

    # Clear any existing handlers
    logger.handlers.clear()

    formatter = UserPathRedactingFormatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger

