"""Exception hierarchy for healthweave."""

from __future__ import annotations


class HealthWeaveError(Exception):
    """Base exception for all healthweave errors."""


class ProviderError(HealthWeaveError):
    """Raised when a model provider cannot produce an analysis."""

    def __init__(self, message: str, provider: str = "") -> None:
        super().__init__(message)
        self.provider = provider


class ProviderRejectedError(ProviderError):
    """The primary provider rejected the request (bad input, quota, auth).

    Never triggers fallback: retrying elsewhere would hide a caller-facing problem.
    """


class ProviderTimeoutError(ProviderError):
    """The local provider exceeded its processing budget."""


class LocalModelUnreachableError(ProviderError):
    """The local model endpoint refused or dropped the connection."""


class AllProvidersFailedError(ProviderError):
    """Every configured provider in the chain failed."""

    def __init__(self, message: str, attempted: list[str] | None = None) -> None:
        super().__init__(message)
        self.attempted = attempted or []


class ReportNotFoundError(HealthWeaveError, KeyError):
    """No stored report matches the given report id and requester."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Report not found"


class PersistenceError(HealthWeaveError):
    """Raised when a persistence backend operation fails."""


__all__ = [
    "HealthWeaveError",
    "ProviderError",
    "ProviderRejectedError",
    "ProviderTimeoutError",
    "LocalModelUnreachableError",
    "AllProvidersFailedError",
    "ReportNotFoundError",
    "PersistenceError",
]
