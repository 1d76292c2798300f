"""
Generic authenticated JSON request client.

Purpose:
- Attaches the session token (if any) as a bearer credential
- Sends JSON to the storefront backend with httpx
- Normalizes every failure into a RequestError carrying a displayable message

Implementation notes:
- One attempt per call: no retries, no backoff, no circuit breaking
- No timeout override unless one is configured. A pending call runs until it
  completes or the transport fails; callers cannot cancel it. Known gap.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Type

import httpx
from pydantic import BaseModel

from src.integrations.contracts.interfaces import TokenStore
from src.integrations.policy.response_wrappers import build_model

logger = logging.getLogger(__name__)

TRANSPORT_ERROR_MESSAGE = "Unable to reach the payment service. Please try again."


class RequestError(Exception):
    """Non-success HTTP response or unreadable response body."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, payload: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class TransportError(RequestError):
    """No response was received at all."""

    def __init__(self, message: str = TRANSPORT_ERROR_MESSAGE) -> None:
        super().__init__(message)


def error_message_from_response(response: httpx.Response) -> str:
    """Prefer the backend's `detail`, then `message`; else synthesize one from the status line."""
    fallback = f"HTTP {response.status_code}: {response.reason_phrase}"
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        for key in ("detail", "message"):
            value = body.get(key)
            if value:
                return str(value)
    return fallback


class RequestClient:
    def __init__(
        self,
        base_url: str,
        token_store: Optional[TokenStore] = None,
        *,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.token_store = token_store
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def build_headers(self, headers: Optional[Mapping[str, str]] = None) -> httpx.Headers:
        merged = httpx.Headers({"Content-Type": "application/json"})
        token = self.token_store.get_token() if self.token_store else None
        if token:
            merged["Authorization"] = f"Bearer {token}"
        # Caller headers win on conflict (case-insensitive)
        if headers:
            merged.update(headers)
        return merged

    async def request(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        json: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        response_model: Optional[Type[BaseModel]] = None,
    ) -> Any:
        url = f"{self.base_url}{endpoint}"
        request_headers = self.build_headers(headers)

        logger.info("%s %s", method, url)
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.request(method, url, json=json, headers=request_headers, params=params)
        except httpx.TransportError as exc:
            logger.error(f"Request error connecting to {url}: {exc}")
            raise TransportError() from exc

        logger.info(f"Received response from {url}: status={response.status_code}")

        if not response.is_success:
            message = error_message_from_response(response)
            logger.warning(f"Request to {url} failed: {message}")
            raise RequestError(message, status_code=response.status_code, payload=response.text)

        try:
            data = response.json()
        except ValueError as exc:
            raise RequestError(
                f"Invalid JSON response from {endpoint}",
                status_code=response.status_code,
                payload=response.text,
            ) from exc

        if response_model is not None:
            return build_model(response_model, data, data)
        return data
