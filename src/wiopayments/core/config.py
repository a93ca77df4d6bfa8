"""
Configuration objects and helpers for the WioPayments client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from . import currency
from .environment import build_environment

__all__ = [
    "ConfigError",
    "DEFAULT_BASE_URL",
    "WioPaymentsConfig",
    "load_config",
]

DEFAULT_BASE_URL = "https://gw.wiopayments.com/api/"
DEFAULT_CURRENCY = "USD"
DEFAULT_WEBHOOK_TOLERANCE = 300

_PARAMETER_TO_ENV_KEY = {
    "api_key": "WIOPAYMENTS_API_KEY",
    "secret_key": "WIOPAYMENTS_SECRET_KEY",
    "base_url": "WIOPAYMENTS_BASE_URL",
    "default_currency": "WIOPAYMENTS_DEFAULT_CURRENCY",
    "webhook_tolerance": "WIOPAYMENTS_WEBHOOK_TOLERANCE",
    "logging_enabled": "WIOPAYMENTS_LOGGING_ENABLED",
}

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


class ConfigError(Exception):
    """Raised when the supplied configuration is invalid."""


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _collect_parameter_overrides(explicit: Mapping[str, Any]) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown configuration parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


def _require(values: Mapping[str, str], key: str) -> str:
    value = values.get(key)
    if value is None or not value.strip():
        raise ConfigError(f"{key} must be provided")
    return value


def _parse_bool(raw: str, key: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{key} must be a boolean, got '{raw}'")


def _parse_tolerance(raw: str) -> int:
    try:
        tolerance = int(raw)
    except ValueError as exc:
        raise ConfigError(
            f"WIOPAYMENTS_WEBHOOK_TOLERANCE must be an integer, got '{raw}'"
        ) from exc
    if tolerance < 0:
        raise ConfigError("WIOPAYMENTS_WEBHOOK_TOLERANCE must not be negative")
    return tolerance


@dataclass(frozen=True)
class WioPaymentsConfig:
    api_key: str
    secret_key: str
    base_url: str = DEFAULT_BASE_URL
    default_currency: str = DEFAULT_CURRENCY
    webhook_tolerance: int = DEFAULT_WEBHOOK_TOLERANCE
    logging_enabled: bool = False

    def __repr__(self) -> str:
        # Credentials stay out of logs and tracebacks.
        return (
            f"WioPaymentsConfig(base_url={self.base_url!r}, "
            f"default_currency={self.default_currency!r}, "
            f"webhook_tolerance={self.webhook_tolerance!r}, "
            f"logging_enabled={self.logging_enabled!r})"
        )

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "WioPaymentsConfig":
        api_key = _require(values, "WIOPAYMENTS_API_KEY")
        secret_key = _require(values, "WIOPAYMENTS_SECRET_KEY")

        base_url = values.get("WIOPAYMENTS_BASE_URL") or DEFAULT_BASE_URL

        default_currency = values.get(
            "WIOPAYMENTS_DEFAULT_CURRENCY", DEFAULT_CURRENCY
        ).strip().upper()
        if not currency.is_supported(default_currency):
            raise ConfigError(
                f"WIOPAYMENTS_DEFAULT_CURRENCY '{default_currency}' is not supported"
            )

        webhook_tolerance = _parse_tolerance(
            values.get("WIOPAYMENTS_WEBHOOK_TOLERANCE", str(DEFAULT_WEBHOOK_TOLERANCE))
        )
        logging_enabled = _parse_bool(
            values.get("WIOPAYMENTS_LOGGING_ENABLED", "false"),
            "WIOPAYMENTS_LOGGING_ENABLED",
        )

        return cls(
            api_key=api_key,
            secret_key=secret_key,
            base_url=base_url,
            default_currency=default_currency,
            webhook_tolerance=webhook_tolerance,
            logging_enabled=logging_enabled,
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        api_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        base_url: Optional[str] = None,
        default_currency: Optional[str] = None,
        webhook_tolerance: Optional[int | str] = None,
        logging_enabled: Optional[bool | str] = None,
    ) -> "WioPaymentsConfig":
        parameter_overrides = _collect_parameter_overrides(
            {
                "api_key": api_key,
                "secret_key": secret_key,
                "base_url": base_url,
                "default_currency": default_currency,
                "webhook_tolerance": webhook_tolerance,
                "logging_enabled": logging_enabled,
            }
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.variables)


def load_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    api_key: Optional[str] = None,
    secret_key: Optional[str] = None,
    base_url: Optional[str] = None,
    default_currency: Optional[str] = None,
    webhook_tolerance: Optional[int | str] = None,
    logging_enabled: Optional[bool | str] = None,
) -> WioPaymentsConfig:
    """
    Convenience wrapper that mirrors :meth:`WioPaymentsConfig.from_env`.

    Settings can come from environment variables, a ``.env`` file, direct
    keyword arguments, or any combination of the three.
    """
    return WioPaymentsConfig.from_env(
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
