from __future__ import annotations


class TimelineError(Exception):
    """Base error for the eventline package."""


class InvalidInputError(TimelineError, ValueError):
    """Raised when chart inputs are empty, misaligned, or out of order."""


class StyleError(TimelineError, ValueError):
    """Raised when a style token override is unknown or malformed."""


class ConfigError(TimelineError):
    """Raised when a dataset or options file cannot be read."""
