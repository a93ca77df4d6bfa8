"""
Public, high-level helpers for building a configured WioPayments client.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import requests

from .core.client import PaymentClient
from .core.config import ConfigError, WioPaymentsConfig, load_config

__all__ = [
    "ConfigError",
    "PaymentClient",
    "WioPaymentsConfig",
    "create_payment_client",
    "load_config",
]


def create_payment_client(
    *,
    config: Optional[WioPaymentsConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    api_key: Optional[str] = None,
    secret_key: Optional[str] = None,
    base_url: Optional[str] = None,
    default_currency: Optional[str] = None,
    webhook_tolerance: Optional[int | str] = None,
    logging_enabled: Optional[bool | str] = None,
) -> PaymentClient:
    """
    Construct a :class:`PaymentClient`.

    Callers can either supply a ready-made :class:`WioPaymentsConfig` or let
    the helper assemble one from environment data and keyword arguments.
    """
    if config is not None:
        extras: tuple[Any, ...] = (
            overrides,
            base,
            api_key,
            secret_key,
            base_url,
            default_currency,
            webhook_tolerance,
            logging_enabled,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built WioPaymentsConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            api_key=api_key,
            secret_key=secret_key,
            base_url=base_url,
            default_currency=default_currency,
            webhook_tolerance=webhook_tolerance,
            logging_enabled=logging_enabled,
        )
    return PaymentClient.from_config(cfg, session=session)
