"""
Tests for webhook signature verification and dispatch.
"""

import hashlib
import hmac
import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tests.conftest import API_KEY, SECRET_KEY
from wiopayments import PaymentClient
from wiopayments.core.exceptions import PaymentFailedError

NOW = 1_700_000_000
PAYLOAD = json.dumps({"event": "payment.succeeded", "data": {"id": "pay_1"}})


def _sign(payload: str, timestamp, secret: str = SECRET_KEY) -> str:
    message = f"{payload}{timestamp}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


@pytest.fixture
def webhook_client() -> PaymentClient:
    return PaymentClient(API_KEY, SECRET_KEY)


class TestVerifyWebhookSignature:
    """Tests for verify_webhook_signature()."""

    def test_valid_signature(self, webhook_client):
        signature = _sign(PAYLOAD, NOW - 10)
        assert webhook_client.verify_webhook_signature(PAYLOAD, signature, NOW - 10, now=NOW)

    def test_string_timestamp(self, webhook_client):
        signature = _sign(PAYLOAD, NOW)
        assert webhook_client.verify_webhook_signature(PAYLOAD, signature, str(NOW), now=NOW)

    @pytest.mark.parametrize("offset", [300, -300])
    def test_window_is_inclusive(self, webhook_client, offset):
        timestamp = NOW + offset
        signature = _sign(PAYLOAD, timestamp)
        assert webhook_client.verify_webhook_signature(PAYLOAD, signature, timestamp, now=NOW)

    @pytest.mark.parametrize("offset", [301, -301])
    def test_outside_window(self, webhook_client, offset):
        timestamp = NOW + offset
        signature = _sign(PAYLOAD, timestamp)
        assert not webhook_client.verify_webhook_signature(
            PAYLOAD, signature, timestamp, now=NOW
        )

    @pytest.mark.parametrize("payload,signature", [("", "abc"), (PAYLOAD, ""), ("", "")])
    def test_empty_inputs(self, webhook_client, payload, signature):
        assert webhook_client.verify_webhook_signature(payload, signature, NOW, now=NOW) is False

    def test_wrong_signature(self, webhook_client):
        assert not webhook_client.verify_webhook_signature(PAYLOAD, "0" * 64, NOW, now=NOW)

    def test_wrong_secret(self, webhook_client):
        signature = _sign(PAYLOAD, NOW, secret="another_secret_key")
        assert not webhook_client.verify_webhook_signature(PAYLOAD, signature, NOW, now=NOW)

    def test_tampered_payload(self, webhook_client):
        signature = _sign(PAYLOAD, NOW)
        assert not webhook_client.verify_webhook_signature(
            PAYLOAD + " ", signature, NOW, now=NOW
        )

    def test_malformed_timestamp(self, webhook_client):
        signature = _sign(PAYLOAD, "soon")
        assert not webhook_client.verify_webhook_signature(PAYLOAD, signature, "soon", now=NOW)

    def test_missing_timestamp_uses_current_time(self, webhook_client):
        """Without a timestamp only a signature over the current second verifies."""
        assert webhook_client.verify_webhook_signature(PAYLOAD, _sign(PAYLOAD, NOW), now=NOW)
        assert not webhook_client.verify_webhook_signature(
            PAYLOAD, _sign(PAYLOAD, NOW - 1), now=NOW
        )

    def test_missing_timestamp_with_real_clock(self, webhook_client, monkeypatch):
        monkeypatch.setattr("wiopayments.core.client.time.time", lambda: float(NOW))
        assert webhook_client.verify_webhook_signature(PAYLOAD, _sign(PAYLOAD, NOW))

    def test_custom_tolerance(self):
        client = PaymentClient(API_KEY, SECRET_KEY, webhook_tolerance=60)
        signature = _sign(PAYLOAD, NOW - 61)
        assert not client.verify_webhook_signature(PAYLOAD, signature, NOW - 61, now=NOW)

    @given(st.integers(min_value=-300, max_value=300))
    def test_any_offset_in_window_verifies(self, offset):
        client = PaymentClient(API_KEY, SECRET_KEY)
        timestamp = NOW + offset
        assert client.verify_webhook_signature(
            PAYLOAD, _sign(PAYLOAD, timestamp), timestamp, now=NOW
        )


class TestHandleWebhook:
    """Tests for handle_webhook()."""

    def test_returns_parsed_event(self, webhook_client):
        event = webhook_client.handle_webhook(PAYLOAD, _sign(PAYLOAD, NOW), NOW, now=NOW)
        assert event == {"event": "payment.succeeded", "data": {"id": "pay_1"}}

    def test_invalid_signature(self, webhook_client):
        with pytest.raises(PaymentFailedError, match="Invalid webhook signature"):
            webhook_client.handle_webhook(PAYLOAD, "bad", NOW, now=NOW)

    def test_invalid_json(self, webhook_client):
        payload = "{not json"
        with pytest.raises(PaymentFailedError, match="Invalid webhook payload format"):
            webhook_client.handle_webhook(payload, _sign(payload, NOW), NOW, now=NOW)

    def test_signature_checked_before_json(self, webhook_client):
        with pytest.raises(PaymentFailedError, match="Invalid webhook signature"):
            webhook_client.handle_webhook("{not json", "bad", NOW, now=NOW)
