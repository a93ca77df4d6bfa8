"""
Exception hierarchy raised by the WioPayments client.
"""

from __future__ import annotations

__all__ = [
    "ApiError",
    "InvalidCredentialsError",
    "InvalidCurrencyError",
    "InvalidResponseError",
    "NetworkError",
    "PaymentFailedError",
    "WioPaymentsError",
]


class WioPaymentsError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str, code: int = 0) -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidCredentialsError(WioPaymentsError):
    """Raised for malformed API credentials and invalid customer emails."""


class InvalidCurrencyError(WioPaymentsError):
    """Raised for unsupported currencies and out-of-range amounts."""


class PaymentFailedError(WioPaymentsError):
    """Raised when the gateway (or the path to it) fails a payment operation."""


class NetworkError(PaymentFailedError):
    """Raised when no response was received from the gateway."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Network error: {message}")


class ApiError(PaymentFailedError):
    """Raised when the gateway answers with an HTTP error status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.api_message = message
        super().__init__(f"API Error ({status_code}): {message}", code=status_code)


class InvalidResponseError(PaymentFailedError):
    """Raised when a response body cannot be decoded into the expected shape."""
