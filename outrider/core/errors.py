"""
Exception types raised by the analysis core.
"""

from typing import Optional


class OutriderError(Exception):
    """Base class for all errors raised by outrider."""


class ConfigurationError(OutriderError, ValueError):
    """Raised when rule, category or scan configuration is malformed."""


class PatternError(OutriderError):
    """Raised when a rule or detector pattern cannot be compiled."""

    def __init__(self, name: str, pattern: str, reason: Optional[str] = None):
        self.name = name
        self.pattern = pattern
        self.reason = reason
        message = f"Invalid pattern for {name!r}: {pattern!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
