"""
Helpers for constructing the request bodies and query strings sent to the gateway.

Each listing endpoint accepts a fixed set of filters. The schemas below map
every accepted key to the transform applied to its value; keys outside a
schema are dropped without error.
"""

from __future__ import annotations

import re
import time
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import urlencode

from email_validator import EmailNotValidError, validate_email

from .exceptions import InvalidCredentialsError

__all__ = [
    "CUSTOMER_FIELDS",
    "CUSTOMER_LIST_FILTERS",
    "CUSTOMER_PAYMENT_FILTERS",
    "DATE_RANGE_FILTERS",
    "PAYMENT_LIST_FILTERS",
    "STATISTICS_FILTERS",
    "build_cancellation",
    "build_capture",
    "build_checkout_session",
    "build_customer",
    "build_payment_intent",
    "build_query",
    "build_refund",
    "build_test_payment",
    "build_test_webhook",
    "normalize_email",
    "with_query",
]

MAX_PAGE_SIZE = 100
CHECKOUT_SESSION_TTL_SECONDS = 1800
GROUP_BY_VALUES = frozenset({"day", "week", "month", "year", "currency", "status"})

Transform = Callable[[Any], Any]

# Returned by a transform to drop the key from the query.
_DROP = object()

_LEADING_NUMBER = re.compile(r"\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def as_int(value: Any) -> int:
    """
    Loose integer cast for filter values.

    Numbers are truncated toward zero and strings are read up to their
    leading numeric part, so ``"2.5"`` becomes 2 and ``"abc"`` becomes 0.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float, Decimal)):
        try:
            return int(value)
        except (OverflowError, ValueError):
            return 0
    match = _LEADING_NUMBER.match(str(value))
    if match is None:
        return 0
    try:
        return int(Decimal(match.group(0)))
    except (InvalidOperation, OverflowError, ValueError):
        return 0


def clamp_limit(value: Any) -> int:
    return min(as_int(value), MAX_PAGE_SIZE)


def upper(value: Any) -> str:
    return str(value).upper()


def passthrough(value: Any) -> Any:
    return value


def group_by(value: Any) -> Any:
    if isinstance(value, str) and value in GROUP_BY_VALUES:
        return value
    return _DROP


PAYMENT_LIST_FILTERS: Dict[str, Transform] = {
    "page": as_int,
    "limit": clamp_limit,
    "status": passthrough,
    "start_date": passthrough,
    "end_date": passthrough,
    "currency": upper,
    "customer_id": passthrough,
    "min_amount": as_int,
    "max_amount": as_int,
}

DATE_RANGE_FILTERS: Dict[str, Transform] = {
    "status": passthrough,
    "currency": upper,
    "limit": clamp_limit,
    "page": as_int,
}

STATISTICS_FILTERS: Dict[str, Transform] = {
    "start_date": passthrough,
    "end_date": passthrough,
    "group_by": group_by,
    "currency": upper,
}

CUSTOMER_LIST_FILTERS: Dict[str, Transform] = {
    "page": as_int,
    "limit": clamp_limit,
    "email": passthrough,
    "created_after": passthrough,
}

CUSTOMER_PAYMENT_FILTERS: Dict[str, Transform] = {
    "page": as_int,
    "limit": clamp_limit,
    "status": passthrough,
    "start_date": passthrough,
    "end_date": passthrough,
    "currency": upper,
}

CHECKOUT_OPTIONS = (
    "success_url",
    "cancel_url",
    "customer_id",
    "customer_email",
    "payment_methods",
    "metadata",
)

CUSTOMER_FIELDS = ("name", "email", "phone", "address", "metadata")


def build_query(
    schema: Mapping[str, Transform],
    filters: Optional[Mapping[str, Any]],
) -> Dict[str, Any]:
    """Apply ``schema`` to ``filters``, in schema order."""
    params: Dict[str, Any] = {}
    if not filters:
        return params
    for key, transform in schema.items():
        value = filters.get(key)
        if value is None:
            continue
        transformed = transform(value)
        if transformed is _DROP:
            continue
        params[key] = transformed
    return params


def with_query(path: str, params: Mapping[str, Any]) -> str:
    if not params:
        return path
    return f"{path}?{urlencode(params)}"


def normalize_email(raw_email: Any) -> str:
    try:
        result = validate_email(str(raw_email), check_deliverability=False)
    except EmailNotValidError as exc:
        raise InvalidCredentialsError("Invalid email address") from exc
    return result.normalized


def build_payment_intent(
    currency: str,
    amount: int,
    options: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    # Caller options win over the base fields.
    payload: Dict[str, Any] = {
        "currency": currency.upper(),
        "amount": amount,
        "confirm": False,
    }
    payload.update(options or {})
    return payload


def build_refund(
    payment_id: str,
    amount: Optional[int] = None,
    metadata: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "payment_id": payment_id,
        "metadata": dict(metadata or {}),
    }
    if amount is not None:
        payload["amount"] = amount
    return payload


def build_checkout_session(
    currency: str,
    amount: int,
    options: Optional[Mapping[str, Any]] = None,
    *,
    now: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Build the body for ``POST /checkout/sessions``.

    Sessions expire after 30 minutes unless ``options["expires_at"]`` is given.
    """
    options = options or {}
    payload: Dict[str, Any] = {
        "currency": currency.upper(),
        "amount": amount,
        "mode": "payment",
    }
    for key in CHECKOUT_OPTIONS:
        if options.get(key) is not None:
            payload[key] = options[key]

    if options.get("expires_at") is not None:
        payload["expires_at"] = options["expires_at"]
    else:
        current = int(time.time()) if now is None else now
        payload["expires_at"] = current + CHECKOUT_SESSION_TTL_SECONDS
    return payload


def build_customer(data: Mapping[str, Any], *, trim_name: bool = False) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for key in CUSTOMER_FIELDS:
        value = data.get(key)
        if value is None:
            continue
        if key == "email":
            value = normalize_email(value)
        elif key == "name" and trim_name:
            value = str(value).strip()
        payload[key] = value
    return payload


def build_cancellation(options: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    options = options or {}
    reason = options.get("reason")
    payload: Dict[str, Any] = {
        "cancellation_reason": reason if reason is not None else "requested_by_customer",
    }
    if options.get("metadata") is not None:
        payload["metadata"] = options["metadata"]
    return payload


def build_capture(amount: Optional[int] = None) -> Dict[str, Any]:
    return {} if amount is None else {"amount": amount}


def build_test_payment(currency: str, amount: int, scenario: str) -> Dict[str, Any]:
    return {
        "currency": currency.upper(),
        "amount": amount,
        "test_scenario": scenario,
        "test_mode": True,
    }


def build_test_webhook(
    event_type: str,
    data: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    return {
        "event_type": event_type,
        "test_mode": True,
        "data": dict(data or {}),
    }
