"""
Core primitives that implement the WioPayments client.
"""

from .client import PaymentClient
from .config import ConfigError, WioPaymentsConfig, load_config
from .currency import (
    CurrencyDescriptor,
    format_amount,
    format_currency,
    from_cents,
    is_supported,
    minor_units,
    supported_currencies,
    to_cents,
)
from .environment import GatewayEnvironment, build_environment
from .exceptions import (
    ApiError,
    InvalidCredentialsError,
    InvalidCurrencyError,
    InvalidResponseError,
    NetworkError,
    PaymentFailedError,
    WioPaymentsError,
)
from .http import LIBRARY_VERSION, SigningClient
from .responses import PaymentRequest, PaymentResponse
from .signing import build_auth_headers, compute_webhook_signature

__all__ = [
    "ApiError",
    "ConfigError",
    "CurrencyDescriptor",
    "GatewayEnvironment",
    "InvalidCredentialsError",
    "InvalidCurrencyError",
    "InvalidResponseError",
    "LIBRARY_VERSION",
    "NetworkError",
    "PaymentClient",
    "PaymentFailedError",
    "PaymentRequest",
    "PaymentResponse",
    "SigningClient",
    "WioPaymentsConfig",
    "WioPaymentsError",
    "build_auth_headers",
    "build_environment",
    "compute_webhook_signature",
    "format_amount",
    "format_currency",
    "from_cents",
    "is_supported",
    "load_config",
    "minor_units",
    "supported_currencies",
    "to_cents",
]
