"""
Logging utilities with security features.

This module provides logging setup with:
- Configurable log levels and output destinations
- Log rotation for file handlers
- Masking of e-mail addresses and Stripe account IDs
"""

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


EMAIL_PATTERN = re.compile(r'\b([A-Za-z0-9])[A-Za-z0-9._%+-]*@([A-Za-z0-9.-]+\.[A-Za-z]{2,})\b')
STRIPE_ACCOUNT_PATTERN = re.compile(r'\bacct_([A-Za-z0-9]{4})[A-Za-z0-9]+')


def mask_email(email: str) -> str:
    """
    Mask email address for safe logging.

    Args:
        email: Email address to mask

    Returns:
        Masked email (e.g., "u***@example.com")

    Examples:
        >>> mask_email("sarah.j@email.co.uk")
        's***@email.co.uk'
        >>> mask_email("invalid")
        '***'
    """
    if not email or "@" not in email:
        return "***"

    local, domain = email.split("@", 1)
    masked_local = local[0] + "***" if len(local) > 0 else "***"
    return f"{masked_local}@{domain}"


def mask_stripe_account(account_id: str) -> str:
    """
    Mask a Stripe connected-account ID, keeping the first four characters.

    Examples:
        >>> mask_stripe_account("acct_1A2B3C4D5E")
        'acct_1A2B***'
    """
    match = STRIPE_ACCOUNT_PATTERN.fullmatch(account_id or "")
    if not match:
        return "***"
    return f"acct_{match.group(1)}***"


class SensitiveDataFilter(logging.Filter):
    """
    Logging filter that automatically masks sensitive information.

    Student and instructor e-mail addresses and Stripe account IDs show up
    in seed summaries and action logs; they are masked before output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Filter and mask sensitive data in log record.

        Args:
            record: Log record to filter

        Returns:
            Always True (allows all records through after masking)
        """
        message = record.getMessage()

        message = EMAIL_PATTERN.sub(r'\1***@\2', message)
        message = STRIPE_ACCOUNT_PATTERN.sub(r'acct_\1***', message)

        record.msg = message
        record.args = None

        return True


def setup_logger(
    name: str = "admin_console",
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up and configure a logger instance.

    Args:
        name: Logger name (default: "admin_console")
        level: Logging level (default: logging.INFO)
        log_file: Optional path to log file for file output

    Returns:
        Configured logger instance

    Examples:
        >>> # Basic console logging
        >>> logger = setup_logger()
        >>> logger.info("Store ready")

        >>> # File logging with rotation
        >>> logger = setup_logger(
        ...     level=logging.DEBUG,
        ...     log_file="output/logs/admin_console.log"
        ... )
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    logger.setLevel(level)

    formatter = logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    sensitive_filter = SensitiveDataFilter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    # Handler-level so records from child loggers are masked too
    console_handler.addFilter(sensitive_filter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(sensitive_filter)
        logger.addHandler(file_handler)

    return logger
