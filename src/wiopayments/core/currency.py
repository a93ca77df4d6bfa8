"""
Static currency table and amount formatting helpers.

Amounts are always carried as integers in minor units (cents for USD, whole
yen for JPY). The helpers here never raise for unknown currencies; callers that
need a hard check use :func:`is_supported` first.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Tuple

__all__ = [
    "CurrencyDescriptor",
    "describe",
    "format_amount",
    "format_currency",
    "from_cents",
    "is_supported",
    "minor_units",
    "supported_currencies",
    "to_cents",
]

_SUPPORTED_CURRENCIES: Tuple[str, ...] = (
    "USD",
    "EUR",
    "GBP",
    "TRY",
    "CAD",
    "AUD",
    "JPY",
    "CHF",
    "SEK",
    "NOK",
    "DKK",
    "PLN",
    "CZK",
    "HUF",
    "RON",
    "BGN",
)
_SUPPORTED_SET = frozenset(_SUPPORTED_CURRENCIES)

_ZERO_DECIMAL_CURRENCIES = frozenset({"JPY", "KRW"})

_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "TRY": "₺",
    "JPY": "¥",
    "CAD": "C$",
    "AUD": "A$",
}

_CENT = Decimal(100)


@dataclass(frozen=True)
class CurrencyDescriptor:
    code: str
    minor_units: int


def is_supported(code: str) -> bool:
    # ASCII only: full Unicode case mapping turns "ſek" into "SEK".
    return code.isascii() and code.upper() in _SUPPORTED_SET


def supported_currencies() -> Tuple[str, ...]:
    return _SUPPORTED_CURRENCIES


def minor_units(code: str) -> int:
    """Decimal places used by ``code``; unknown codes default to two."""
    return 0 if code.upper() in _ZERO_DECIMAL_CURRENCIES else 2


def describe(code: str) -> CurrencyDescriptor:
    normalized = code.upper()
    return CurrencyDescriptor(code=normalized, minor_units=minor_units(normalized))


def format_currency(amount_minor: int, code: str) -> str:
    """
    Render ``amount_minor`` in major units followed by the ISO code.

    ``format_currency(123456, "usd")`` gives ``"1,234.56 USD"``.
    """
    units = minor_units(code)
    amount = Decimal(amount_minor).scaleb(-units)
    return f"{amount:,.{units}f} {code.upper()}"


def format_amount(amount_minor: int, currency: str) -> str:
    """
    Render ``amount_minor`` with a currency symbol prefix.

    Currencies without a known symbol fall back to their uppercased code, so
    ``format_amount(1500, "XYZ")`` gives ``"XYZ15.00"``. JPY is printed without
    decimals and without dividing by 100.
    """
    code = currency.upper()
    symbol = _SYMBOLS.get(code, code)
    if code == "JPY":
        return f"{symbol}{amount_minor:,}"
    return f"{symbol}{amount_minor / 100:,.2f}"


def to_cents(amount: float) -> int:
    # Go through str() so 0.995 rounds as written rather than as its binary value.
    scaled = Decimal(str(amount)) * _CENT
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_cents(amount_minor: int) -> float:
    return amount_minor / 100
