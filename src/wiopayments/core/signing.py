"""
HMAC helpers shared by outbound request signing and webhook verification.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import secrets
import time
from typing import Any, Dict, Mapping, Optional

__all__ = [
    "EMPTY_BODY",
    "build_auth_headers",
    "canonical_json",
    "compute_webhook_signature",
    "generate_nonce",
    "sign_request",
    "signatures_match",
]

_NONCE_BYTES = 16
EMPTY_BODY = "[]"


def _hmac_hex(secret_key: str, message: str) -> str:
    return hmac.new(
        secret_key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
    ).hexdigest()


def canonical_json(body: Optional[Mapping[str, Any]]) -> str:
    """
    Serialize ``body`` the way it is both signed and sent.

    Keys are sorted and separators are compact so the same mapping always
    yields the same bytes. ``None`` and empty mappings serialize to ``"[]"``,
    which is what the gateway expects to be signed for body-less calls.
    """
    if not body:
        return EMPTY_BODY
    return json.dumps(body, separators=(",", ":"), sort_keys=True)


def generate_nonce() -> str:
    return secrets.token_hex(_NONCE_BYTES)


def sign_request(
    api_key: str,
    secret_key: str,
    timestamp: int,
    nonce: str,
    body_text: str,
) -> str:
    return _hmac_hex(secret_key, f"{api_key}{timestamp}{nonce}{body_text}")


def build_auth_headers(
    api_key: str,
    secret_key: str,
    body_text: str,
    *,
    now: Optional[int] = None,
    nonce: Optional[str] = None,
) -> Dict[str, str]:
    """
    Build the per-call authentication headers.

    A fresh timestamp and nonce are generated unless supplied, so repeated or
    concurrent calls never share a signature.
    """
    timestamp = int(time.time()) if now is None else now
    nonce_value = nonce if nonce is not None else generate_nonce()
    return {
        "X-API-Key": api_key,
        "X-Timestamp": str(timestamp),
        "X-Nonce": nonce_value,
        "X-Signature": sign_request(
            api_key, secret_key, timestamp, nonce_value, body_text
        ),
    }


def compute_webhook_signature(secret_key: str, payload: str, timestamp: int) -> str:
    return _hmac_hex(secret_key, f"{payload}{timestamp}")


def signatures_match(expected: str, provided: str) -> bool:
    return hmac.compare_digest(
        expected.encode("utf-8"), provided.encode("utf-8")
    )
