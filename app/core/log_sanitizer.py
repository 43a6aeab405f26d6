"""
Log sanitization filter to keep webhook secrets and user PII out of the logs.

Webhook bodies and headers end up in log lines (unknown events are logged
verbatim), so every record passes through this filter before any handler
writes it.
"""

import logging
import re
import traceback
from typing import List, Optional, Pattern, Tuple


class SensitiveDataFilter(logging.Filter):
    """
    Logging filter that redacts sensitive data from log records.

    Always lets the record through, with the message (and any formatted
    exception text) rewritten.
    """

    # Order matters: specific token shapes before the generic key=value pattern
    SENSITIVE_PATTERNS: List[Tuple[Pattern[str], str]] = [
        # Svix signing secrets
        (re.compile(r"\bwhsec_[A-Za-z0-9+/=]+"), "WEBHOOK_SECRET_REDACTED"),
        # Clerk backend / publishable keys
        (re.compile(r"\b(sk|pk)_(live|test)_[A-Za-z0-9]+"), r"\1_\2_REDACTED"),
        # Svix signature header entries ("v1,<base64>")
        (re.compile(r"\bv1,[A-Za-z0-9+/]{20,}={0,2}"), "v1,SIGNATURE_REDACTED"),
        # Standalone Bearer tokens
        (re.compile(r"\b(Bearer\s+)[A-Za-z0-9\-_\.]+", re.IGNORECASE), r"\1REDACTED"),
        # key=value / key: value style secrets
        (
            re.compile(
                r'(api[_-]?key|secret[_-]?key|service[_-]?key|token|password|secret)\s*[:=]\s*["\']?([^\s"\',}]+)["\']?',
                re.IGNORECASE,
            ),
            r"\1=REDACTED",
        ),
        # E-mail addresses (PII from user payloads)
        (re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"), "EMAIL_REDACTED"),
    ]

    def __init__(self, name: str = ""):
        super().__init__(name)

    def sanitize(self, text: str) -> str:
        for pattern, replacement in self.SENSITIVE_PATTERNS:
            text = pattern.sub(replacement, text)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self.sanitize(str(record.getMessage()))
        record.args = ()  # already merged into msg

        if record.exc_info and record.exc_info[0] is not None:
            exc_text = "".join(traceback.format_exception(*record.exc_info))
            record.exc_text = self.sanitize(exc_text).strip()

        return True


def add_sensitive_data_filter(logger: Optional[logging.Logger] = None) -> None:
    """
    Add the sensitive data filter to a logger or to the root logger.

    Args:
        logger: The logger to add the filter to. If None, adds to root logger.
    """
    if logger is None:
        logger = logging.getLogger()

    for existing in logger.filters:
        if isinstance(existing, SensitiveDataFilter):
            return

    logger.addFilter(SensitiveDataFilter())


def configure_secure_logging() -> None:
    """Install the sensitive data filter on the root logger and its handlers."""
    add_sensitive_data_filter()

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if not any(isinstance(f, SensitiveDataFilter) for f in handler.filters):
            handler.addFilter(SensitiveDataFilter())
