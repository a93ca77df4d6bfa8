"""
Typed request and result objects exchanged with the gateway.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from .exceptions import InvalidResponseError

__all__ = [
    "PaymentRequest",
    "PaymentResponse",
]

_SUCCESSFUL_STATUSES = frozenset({"succeeded", "completed"})
_PENDING_STATUSES = frozenset({"pending", "processing"})
_FAILED_STATUSES = frozenset({"failed", "canceled"})


def _generate_order_id() -> str:
    return "wio_" + uuid.uuid4().hex[:13]


@dataclass(frozen=True)
class PaymentRequest:
    currency: str
    amount: int
    metadata: Mapping[str, Any] = field(default_factory=dict)
    order_id: Optional[str] = None
    customer_data: Optional[Mapping[str, Any]] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "currency": self.currency,
            "amount": self.amount,
            "metadata": dict(self.metadata),
            "order_id": self.order_id or _generate_order_id(),
            "customer_data": (
                dict(self.customer_data) if self.customer_data is not None else None
            ),
        }


def _parse_created_at(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    text = str(value)
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise InvalidResponseError(f"Invalid created_at timestamp: {value!r}") from exc


def _parse_amount(value: Any) -> Optional[int]:
    """Amounts are whole minor units; integral floats and digit strings are accepted."""
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    raise InvalidResponseError(f"Invalid amount: {value!r}")


@dataclass(frozen=True)
class PaymentResponse:
    """
    A payment as reported by the gateway.

    ``status`` is kept verbatim. The ``is_*`` predicates classify it into
    disjoint buckets; statuses the client does not know about fall in none of
    them.
    """

    id: str
    status: str
    currency: Optional[str] = None
    amount: Optional[int] = None
    order_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    client_secret: Optional[str] = None
    created_at: Optional[datetime] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "PaymentResponse":
        for required in ("id", "status"):
            if payload.get(required) is None:
                raise InvalidResponseError(
                    f"Invalid payment response: missing '{required}'"
                )
        amount = _parse_amount(payload.get("amount"))
        return cls(
            id=str(payload["id"]),
            status=str(payload["status"]),
            currency=payload.get("currency"),
            amount=amount,
            order_id=payload.get("order_id"),
            metadata=payload.get("metadata"),
            client_secret=payload.get("client_secret"),
            created_at=_parse_created_at(payload.get("created_at")),
            raw=dict(payload),
        )

    def is_successful(self) -> bool:
        return self.status in _SUCCESSFUL_STATUSES

    def is_pending(self) -> bool:
        return self.status in _PENDING_STATUSES

    def is_failed(self) -> bool:
        return self.status in _FAILED_STATUSES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status,
            "currency": self.currency,
            "amount": self.amount,
            "order_id": self.order_id,
            "metadata": self.metadata,
            "client_secret": self.client_secret,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
