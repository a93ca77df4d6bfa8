"""
High-level client for the WioPayments gateway.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import requests

from . import currency
from .config import DEFAULT_BASE_URL, DEFAULT_WEBHOOK_TOLERANCE, WioPaymentsConfig
from .exceptions import (
    InvalidCredentialsError,
    InvalidCurrencyError,
    PaymentFailedError,
)
from .http import SigningClient
from .payloads import (
    CUSTOMER_LIST_FILTERS,
    CUSTOMER_PAYMENT_FILTERS,
    DATE_RANGE_FILTERS,
    PAYMENT_LIST_FILTERS,
    STATISTICS_FILTERS,
    build_cancellation,
    build_capture,
    build_checkout_session,
    build_customer,
    build_payment_intent,
    build_query,
    build_refund,
    build_test_payment,
    build_test_webhook,
    with_query,
)
from .responses import PaymentRequest, PaymentResponse
from .signing import compute_webhook_signature, signatures_match

__all__ = [
    "MAX_AMOUNT",
    "PaymentClient",
]

MIN_CREDENTIAL_LENGTH = 10
MAX_AMOUNT = 99_999_999

Timestamp = Union[int, str]


def _validate_credentials(api_key: str, secret_key: str) -> None:
    if not api_key.strip() or not secret_key.strip():
        raise InvalidCredentialsError("API key and secret key are required")
    if len(api_key) < MIN_CREDENTIAL_LENGTH or len(secret_key) < MIN_CREDENTIAL_LENGTH:
        raise InvalidCredentialsError("Invalid API key or secret key format")


def _validate_currency(code: str) -> None:
    if not currency.is_supported(code):
        raise InvalidCurrencyError(
            f"Unsupported currency: {code}. Supported currencies: "
            + ", ".join(currency.supported_currencies())
        )


def _validate_amount(amount: int) -> None:
    if amount <= 0:
        raise InvalidCurrencyError("Amount must be greater than zero")
    if amount > MAX_AMOUNT:
        raise InvalidCurrencyError("Amount exceeds maximum allowed limit")


def _validate_charge(code: str, amount: int) -> None:
    _validate_currency(code)
    _validate_amount(amount)


class PaymentClient:
    """
    Public entry point for the WioPayments gateway.

    Inputs are validated before any request is made; everything else is sent
    through a :class:`SigningClient` owned by this instance. The only mutable
    state is the test-mode flag, which is guarded by a lock.
    """

    def __init__(
        self,
        api_key: str,
        secret_key: str,
        base_url: Optional[str] = None,
        *,
        session: Optional[requests.Session] = None,
        default_currency: str = "USD",
        webhook_tolerance: int = DEFAULT_WEBHOOK_TOLERANCE,
        log_requests: bool = False,
    ) -> None:
        _validate_credentials(api_key, secret_key)
        _validate_currency(default_currency)

        self._secret_key = secret_key
        self.default_currency = default_currency.upper()
        self.webhook_tolerance = webhook_tolerance
        self.http = SigningClient(
            base_url or DEFAULT_BASE_URL,
            api_key,
            secret_key,
            session=session,
            log_requests=log_requests,
        )
        self._test_mode = False
        self._test_mode_lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: WioPaymentsConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> "PaymentClient":
        return cls(
            config.api_key,
            config.secret_key,
            config.base_url,
            session=session,
            default_currency=config.default_currency,
            webhook_tolerance=config.webhook_tolerance,
            log_requests=config.logging_enabled,
        )

    # Payments

    def charge(
        self,
        currency_code: str,
        amount: int,
        metadata: Optional[Mapping[str, Any]] = None,
        *,
        order_id: Optional[str] = None,
        customer_data: Optional[Mapping[str, Any]] = None,
    ) -> PaymentResponse:
        """
        Create and process a payment.

        Any failure after validation is re-raised as :class:`PaymentFailedError`
        with the original exception chained as its cause.
        """
        _validate_charge(currency_code, amount)
        request = PaymentRequest(
            currency=currency_code.upper(),
            amount=amount,
            metadata=dict(metadata or {}),
            order_id=order_id,
            customer_data=customer_data,
        )
        try:
            response = self.http.post("/create-payment", request.to_payload())
            return PaymentResponse.from_response(response)
        except Exception as exc:  # noqa: BLE001
            logging.error("Payment processing failed: %s", exc)
            raise PaymentFailedError(f"Payment processing failed: {exc}") from exc

    def create_payment_intent(
        self,
        currency_code: str,
        amount: int,
        options: Optional[Mapping[str, Any]] = None,
    ) -> PaymentResponse:
        _validate_charge(currency_code, amount)
        response = self.http.post(
            "/payment-intents", build_payment_intent(currency_code, amount, options)
        )
        return PaymentResponse.from_response(response)

    def get_payment(self, payment_id: str) -> PaymentResponse:
        return PaymentResponse.from_response(self.http.get(f"/payments/{payment_id}"))

    def refund(
        self,
        payment_id: str,
        amount: Optional[int] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> PaymentResponse:
        if amount is not None:
            _validate_amount(amount)
        response = self.http.post("/refunds", build_refund(payment_id, amount, metadata))
        return PaymentResponse.from_response(response)

    def cancel_payment(
        self,
        payment_id: str,
        options: Optional[Mapping[str, Any]] = None,
    ) -> PaymentResponse:
        response = self.http.post(
            f"/payments/{payment_id}/cancel", build_cancellation(options)
        )
        return PaymentResponse.from_response(response)

    def capture_payment(
        self,
        payment_id: str,
        amount: Optional[int] = None,
    ) -> PaymentResponse:
        if amount is not None:
            _validate_amount(amount)
        response = self.http.post(f"/payments/{payment_id}/capture", build_capture(amount))
        return PaymentResponse.from_response(response)

    def list_payments(self, filters: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        params = build_query(PAYMENT_LIST_FILTERS, filters)
        return self.http.get(with_query("/payments", params))

    def get_payments_by_date_range(
        self,
        start_date: str,
        end_date: str,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"start_date": start_date, "end_date": end_date}
        params.update(build_query(DATE_RANGE_FILTERS, options))
        return self.http.get(with_query("/payments/date-range", params))

    def get_payment_statistics(
        self,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        params = build_query(STATISTICS_FILTERS, filters)
        return self.http.get(with_query("/payments/statistics", params))

    def create_checkout_session(
        self,
        currency_code: str,
        amount: int,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        _validate_charge(currency_code, amount)
        return self.http.post(
            "/checkout/sessions", build_checkout_session(currency_code, amount, options)
        )

    # Customers

    def create_customer(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        return self.http.post("/customers", build_customer(data, trim_name=True))

    def get_customer(self, customer_id: str) -> Dict[str, Any]:
        return self.http.get(f"/customers/{customer_id}")

    def update_customer(self, customer_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        return self.http.put(f"/customers/{customer_id}", build_customer(data))

    def list_customers(self, filters: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        params = build_query(CUSTOMER_LIST_FILTERS, filters)
        return self.http.get(with_query("/customers", params))

    def get_customer_payments(
        self,
        customer_id: str,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        params = build_query(CUSTOMER_PAYMENT_FILTERS, filters)
        return self.http.get(with_query(f"/customers/{customer_id}/payments", params))

    # Account

    def validate_api_credentials(self) -> Dict[str, Any]:
        """
        Health-check the credentials against ``/account/verify``.

        Never raises: failures are reported as ``{"valid": False, "error": ...}``.
        """
        try:
            response = self.http.get("/account/verify")
        except Exception as exc:  # noqa: BLE001
            logging.warning("Credential validation failed: %s", exc)
            return {"valid": False, "error": str(exc)}
        return {"valid": True, "account_info": response}

    def get_account_info(self) -> Dict[str, Any]:
        return self.http.get("/account")

    def get_balance(self) -> Dict[str, Any]:
        return self.http.get("/balance")

    # Test mode

    def set_test_mode(self, enabled: bool = True) -> "PaymentClient":
        with self._test_mode_lock:
            self._test_mode = enabled
        return self

    def is_test_mode(self) -> bool:
        with self._test_mode_lock:
            return self._test_mode

    def create_test_payment(
        self,
        currency_code: Optional[str] = None,
        amount: int = 1000,
        scenario: str = "success",
    ) -> PaymentResponse:
        if not self.is_test_mode():
            raise PaymentFailedError("Test mode must be enabled to create test payments")
        payload = build_test_payment(currency_code or self.default_currency, amount, scenario)
        return PaymentResponse.from_response(self.http.post("/test/payments", payload))

    def simulate_webhook(
        self,
        event_type: str,
        data: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        if not self.is_test_mode():
            raise PaymentFailedError("Test mode must be enabled to simulate webhooks")
        return self.http.post("/test/webhooks", build_test_webhook(event_type, data))

    # Webhooks

    def verify_webhook_signature(
        self,
        payload: str,
        signature: str,
        timestamp: Optional[Timestamp] = None,
        *,
        now: Optional[int] = None,
    ) -> bool:
        """
        Check a webhook signature computed as HMAC-SHA256(secret, payload + timestamp).

        Timestamps more than ``webhook_tolerance`` seconds away from the current
        time, in either direction, are rejected. Without ``timestamp`` the
        current time is used as the signed timestamp, so only signatures
        produced in the same second verify.
        """
        if not payload or not signature:
            return False

        current = int(time.time()) if now is None else now
        if timestamp is None or timestamp == "":
            effective = current
        else:
            try:
                effective = int(timestamp)
            except (TypeError, ValueError):
                logging.warning("Rejecting webhook with malformed timestamp %r", timestamp)
                return False

        if abs(current - effective) > self.webhook_tolerance:
            return False

        expected = compute_webhook_signature(self._secret_key, payload, effective)
        return signatures_match(expected, signature)

    def handle_webhook(
        self,
        payload: str,
        signature: str,
        timestamp: Optional[Timestamp] = None,
        *,
        now: Optional[int] = None,
    ) -> Any:
        if not self.verify_webhook_signature(payload, signature, timestamp, now=now):
            raise PaymentFailedError("Invalid webhook signature")
        try:
            return json.loads(payload)
        except ValueError as exc:
            raise PaymentFailedError("Invalid webhook payload format") from exc

    # Static helpers

    @staticmethod
    def format_amount(amount: int, currency_code: str) -> str:
        return currency.format_amount(amount, currency_code)

    @staticmethod
    def to_cents(amount: float) -> int:
        return currency.to_cents(amount)

    @staticmethod
    def from_cents(amount: int) -> float:
        return currency.from_cents(amount)

    @staticmethod
    def is_currency_supported(currency_code: str) -> bool:
        return currency.is_supported(currency_code)

    @staticmethod
    def get_supported_currencies() -> Tuple[str, ...]:
        return currency.supported_currencies()
