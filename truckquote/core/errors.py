"""Quote calculation failures"""
from typing import Optional


class QuoteError(Exception):
    """Base class for every failure that aborts a quote calculation."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class QuoteValidationError(QuoteError):
    """Request fields are missing or out of range. Raised before any lookup."""

    def __init__(self, errors: list, message: str = "Invalid quote request"):
        super().__init__(message)
        self.errors = errors


class ConfigurationError(QuoteError):
    """Provider credentials or the rate configuration are missing."""


class RouteLookupError(QuoteError, LookupError):
    """The distance provider found no drivable route between two points."""

    def __init__(self, message: str, status: Optional[str] = None):
        super().__init__(message)
        self.status = status


class TransientError(QuoteError):
    """Network failure, timeout or provider outage. The caller may resubmit."""

    def __init__(self, message: str, status: Optional[str] = None):
        super().__init__(message)
        self.status = status
