"""
Public facade for the WioPayments client package.

The most useful pieces are re-exported here so integrators can write
``from wiopayments import ...`` without navigating the package.
"""

from .api import create_payment_client
from .core import (
    LIBRARY_VERSION,
    ApiError,
    ConfigError,
    InvalidCredentialsError,
    InvalidCurrencyError,
    InvalidResponseError,
    NetworkError,
    PaymentClient,
    PaymentFailedError,
    PaymentRequest,
    PaymentResponse,
    SigningClient,
    WioPaymentsConfig,
    WioPaymentsError,
    format_amount,
    format_currency,
    from_cents,
    is_supported,
    load_config,
    minor_units,
    supported_currencies,
    to_cents,
)

__version__ = LIBRARY_VERSION

__all__ = (
    "ApiError",
    "ConfigError",
    "InvalidCredentialsError",
    "InvalidCurrencyError",
    "InvalidResponseError",
    "NetworkError",
    "PaymentClient",
    "PaymentFailedError",
    "PaymentRequest",
    "PaymentResponse",
    "SigningClient",
    "WioPaymentsConfig",
    "WioPaymentsError",
    "create_payment_client",
    "format_amount",
    "format_currency",
    "from_cents",
    "is_supported",
    "load_config",
    "minor_units",
    "supported_currencies",
    "to_cents",
)
