# cath/core/logger.py
"""
Shared application logger.
"""
import logging
import re
import sys

from cath.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_EMAIL_RE = re.compile(r"\b[\w._%+-]+@[\w.-]+\.[A-Za-z]{2,}\b")


def _configure() -> logging.Logger:
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(settings.LOG_LEVEL.upper())
    return logging.getLogger("cath")


def redact_emails(text: str) -> str:
    """Replace anything that looks like an email address."""
    return _EMAIL_RE.sub("[REDACTED_EMAIL]", text or "")


logger = _configure()
