"""
Error taxonomy for the generation core.

Configuration errors are fatal and never retried. Constraint violations
are raised before any generation begins, so no partial output exists
when one is seen. Everything else in the pipeline is total.
"""

from __future__ import annotations


class PaygenError(Exception):
    """Base class for all paygen errors."""


class ConfigurationError(PaygenError):
    """A fatal configuration problem (unknown format, missing table, bad config)."""


class UnsupportedFormatError(ConfigurationError):
    """Raised when a file format identifier has no registered adapter."""

    def __init__(self, file_format: str, supported: list[str] | None = None):
        self.file_format = file_format
        self.supported = list(supported or [])
        message = f"Unsupported file format: {file_format!r}"
        if self.supported:
            message += f" (supported: {', '.join(self.supported)})"
        super().__init__(message)


class HolidayTableError(ConfigurationError):
    """Raised when the bank-holiday table has no entry for a requested year."""

    def __init__(self, year: int):
        self.year = year
        super().__init__(f"No bank holiday table for year {year}")


class ConstraintViolationError(PaygenError):
    """Raised when a request cannot be satisfied structurally (e.g. row_count < 1)."""


class PathTraversalError(PaygenError):
    """Raised when an output path resolves outside its root."""
