"""
Real Redis-backed cart/token stores for deployments where REDIS_URL is set.
Implements the same interfaces as src.database.redis (in-memory stubs).
"""

from __future__ import annotations

import json
import os
import logging
from typing import List, Optional

import redis

from src.checkout.cart import CartItem
from src.integrations.contracts.interfaces import CartStore, TokenStore

logger = logging.getLogger(__name__)


def _default_url() -> str:
    return os.getenv("REDIS_URL", "redis://localhost:6379/0")


class RedisCartStore(CartStore):
    """
    Cart stored as a JSON list under `{cart_key}:{session_id}`.
    """

    def __init__(self, session_id: str, url: Optional[str] = None, cart_key: str = "cart", client=None) -> None:
        self._client = client or redis.from_url(url or _default_url(), decode_responses=True)
        self._key = f"{cart_key}:{session_id}"

    def get_cart(self) -> List[CartItem]:
        raw = self._client.get(self._key)
        if not raw:
            return []
        try:
            rows = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable cart under %s", self._key)
            return []
        return [CartItem.from_dict(row) for row in rows]

    def clear_cart(self) -> None:
        self._client.delete(self._key)

    def save_cart(self, items: List[CartItem]) -> None:
        self._client.set(self._key, json.dumps([item.to_dict() for item in items], default=str))


class RedisTokenStore(TokenStore):
    """Read-only view of the access token stored under `{token_key}:{session_id}`."""

    def __init__(self, session_id: str, url: Optional[str] = None, token_key: str = "access_token", client=None) -> None:
        self._client = client or redis.from_url(url or _default_url(), decode_responses=True)
        self._key = f"{token_key}:{session_id}"

    def get_token(self) -> Optional[str]:
        return self._client.get(self._key) or None
