"""
Utility functions for the deckgen backend.

Provides common functionality for:
- Request deadlines and cancellation
- Text sanitization of parsed documents
"""
from __future__ import annotations

import re
import time
import unicodedata

from deckgen.exceptions import DeadlineExceededError


# =============================================================================
# Deadlines
# =============================================================================

class Deadline:
    """
    Point in time after which a request must not start new external calls.

    A deadline may also be cancelled explicitly. The HTTP routes bound
    requests by time only and never call ``cancel()``.
    Callers driving the service directly (scripts, workers) use it to stop
    a workflow before its next provider call.

    Example:
        >>> deadline = Deadline.after(30)
        >>> deadline.check("invoke_provider")
    """

    def __init__(self, expires_at: float | None = None) -> None:
        """
        Args:
            expires_at: ``time.monotonic()`` timestamp, or None for no limit
        """
        self._expires_at = expires_at
        self._cancelled = False

    @classmethod
    def after(cls, seconds: float | None) -> "Deadline":
        """Create a deadline ``seconds`` from now (None for no limit)."""
        if seconds is None:
            return cls(None)
        return cls(time.monotonic() + seconds)

    def remaining(self) -> float | None:
        """Seconds left, clamped at 0, or None if unbounded."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self._expires_at is not None and time.monotonic() >= self._expires_at

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Make every later ``check()`` raise."""
        self._cancelled = True

    def check(self, step: str) -> None:
        """
        Raise if the deadline can no longer be honoured.

        Raises:
            DeadlineExceededError: If cancelled or expired
        """
        if self._cancelled:
            raise DeadlineExceededError(f"Request cancelled before {step}")
        if self.expired:
            raise DeadlineExceededError(f"Request deadline expired before {step}")

    def __repr__(self) -> str:
        return f"Deadline(remaining={self.remaining()}, cancelled={self._cancelled})"


# =============================================================================
# Text Sanitization
# =============================================================================

_CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]')
_EXCESSIVE_NEWLINES = re.compile(r'\n{3,}')
_TRAILING_SPACES = re.compile(r'[ \t]+\n')


def sanitize_text(text: str) -> str:
    """
    Sanitize extracted document text before it is sent to a provider.

    - Normalizes Unicode (NFC form)
    - Removes control characters (keeps newlines and tabs)
    - Strips trailing spaces and collapses runs of blank lines

    Args:
        text: Input text to sanitize

    Returns:
        Sanitized text string
    """
    if not text:
        return ""

    text = unicodedata.normalize("NFC", text)
    text = _CONTROL_CHARS.sub("", text)
    text = _TRAILING_SPACES.sub("\n", text)
    text = _EXCESSIVE_NEWLINES.sub("\n\n", text)
    return text.strip()
