"""Centralized logging helpers.

Every module logs through ``logging.getLogger(__name__)`` and attaches
structured fields with ``extra=extra_context(...)``. Formatting and level
selection happen once in ``configure_logging``.
"""
from __future__ import annotations

import logging
import os
import re
import time
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from constants import Constants

ENV_LOG_LEVEL = "DEPSYNC_LOG_LEVEL"
ENV_LOG_FILE = "DEPSYNC_LOG_FILE"

_SENSITIVE_PARAMS = {"token", "access_token", "api_key", "apikey", "key", "password", "secret", "auth"}
_REDACTED = "[REDACTED]"
_BEARER_RE = re.compile(r"(?i)(bearer\s+)[A-Za-z0-9\-._~+/]+=*")
_USERINFO_RE = re.compile(r"(?i)(https?://)[^/@\s]+@")


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Configure the root logger once for the process.

    Args:
        level: Level name; falls back to $DEPSYNC_LOG_LEVEL, then INFO.
        log_file: Optional file to log into; falls back to $DEPSYNC_LOG_FILE.
    """
    level_name = (level or os.environ.get(ENV_LOG_LEVEL) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)
    target = log_file or os.environ.get(ENV_LOG_FILE)

    handler: logging.Handler
    if target:
        handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level_value)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` mapping for structured log records, dropping None values."""
    return {key: value for key, value in fields.items() if value is not None}


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def redact(text: str) -> str:
    """Strip bearer tokens and URL credentials from free-form text."""
    if not text:
        return text
    text = _BEARER_RE.sub(lambda m: m.group(1) + _REDACTED, text)
    return _USERINFO_RE.sub(lambda m: m.group(1) + _REDACTED + "@", text)


def safe_url(url: str) -> str:
    """Return ``url`` with userinfo and sensitive query parameters redacted."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return redact(url)
    netloc = parts.netloc
    if "@" in netloc:
        netloc = _REDACTED + "@" + netloc.rsplit("@", 1)[1]
    query = parts.query
    if query:
        pairs = [
            (key, _REDACTED if key.lower() in _SENSITIVE_PARAMS else value)
            for key, value in parse_qsl(query, keep_blank_values=True)
        ]
        query = urlencode(pairs, safe="[]")
    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


class Timer:
    """Context manager measuring wall-clock duration."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.monotonic()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.monotonic()

    def duration_ms(self) -> int:
        """Elapsed milliseconds; measured up to now while still running."""
        end = self._end if self._end is not None else time.monotonic()
        return int((end - self._start) * 1000)
