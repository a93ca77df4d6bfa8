"""
Signed HTTP transport for the WioPayments gateway.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional

import requests

from .exceptions import ApiError, InvalidResponseError, NetworkError
from .signing import build_auth_headers, canonical_json

__all__ = [
    "LIBRARY_VERSION",
    "SigningClient",
    "USER_AGENT",
]

LIBRARY_VERSION = "1.0.0"
USER_AGENT = f"wiopayments-python/{LIBRARY_VERSION}"
DEFAULT_TIMEOUT_SECONDS = 30

_BASE_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
    "User-Agent": USER_AGENT,
}


def _decode_json(response: requests.Response) -> Any:
    if not response.content:
        raise ValueError("empty response body")
    return json.loads(response.content)


def _error_message(response: requests.Response) -> str:
    try:
        decoded = _decode_json(response)
    except ValueError:
        return "Unknown API error"
    if not isinstance(decoded, dict):
        return "Unknown API error"
    for key in ("message", "error"):
        if decoded.get(key) is not None:
            return str(decoded[key])
    return "Unknown API error"


class SigningClient:
    """
    Sends one signed JSON request per call and classifies the outcome.

    The injected session is used as-is; headers are passed per request so a
    shared session is never mutated.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        secret_key: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        log_requests: bool = False,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._secret_key = secret_key
        self.session = session or requests.Session()
        self.timeout = timeout
        self.log_requests = log_requests

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def get(self, path: str) -> Dict[str, Any]:
        return self.request("GET", path)

    def post(self, path: str, body: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        return self.request("POST", path, body)

    def put(self, path: str, body: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        return self.request("PUT", path, body)

    def request(
        self,
        method: str,
        path: str,
        body: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = self.url_for(path)
        body_text = canonical_json(body)
        headers = dict(_BASE_HEADERS)
        headers.update(build_auth_headers(self._api_key, self._secret_key, body_text))

        if self.log_requests:
            logging.info("Sending %s request to %s", method, url)

        try:
            response = self.session.request(
                method,
                url,
                data=body_text.encode("utf-8") if body else None,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logging.warning("%s %s failed before a response arrived: %s", method, url, exc)
            raise NetworkError(str(exc)) from exc

        if self.log_requests:
            logging.info("Gateway responded to %s %s with %s", method, url, response.status_code)

        if response.status_code >= 400:
            message = _error_message(response)
            logging.warning(
                "Gateway rejected %s %s with %s: %s",
                method,
                url,
                response.status_code,
                message,
            )
            raise ApiError(response.status_code, message)

        try:
            decoded = _decode_json(response)
        except ValueError as exc:
            raise InvalidResponseError("Invalid JSON response") from exc
        if not isinstance(decoded, dict):
            raise InvalidResponseError("Invalid JSON response")
        return decoded
