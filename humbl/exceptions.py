"""Shared exception hierarchy for the Humbl services."""
from __future__ import annotations

from typing import Optional


class PlatformError(Exception):
    """Base exception for domain specific failures."""


class RepositoryError(PlatformError):
    """Raised when data access fails."""

    def __init__(self, message: str, *, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.cause = cause


class ProviderError(PlatformError):
    """Raised when an upstream AI provider rejects or fails a request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BudgetExhaustedError(ProviderError):
    """Raised when a provider credential has no remaining budget."""


__all__ = [
    "PlatformError",
    "RepositoryError",
    "ProviderError",
    "BudgetExhaustedError",
]
