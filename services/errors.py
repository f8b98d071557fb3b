from __future__ import annotations

from typing import Optional


class EmailFinderError(RuntimeError):
    """Base class for failures surfaced to the caller of a lookup."""


class ConfigurationError(EmailFinderError):
    """Credentials or backend location are missing; the user has to fix config."""


class BackendError(EmailFinderError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InsufficientCreditsError(BackendError):
    def __init__(self, balance: Optional[int]) -> None:
        super().__init__(
            f"Insufficient credits. You have {balance} credits remaining.",
            status_code=402,
        )
        self.balance = balance


class NoEmailFoundError(EmailFinderError):
    def __init__(self, message: str = "No email found for this person") -> None:
        super().__init__(message)
