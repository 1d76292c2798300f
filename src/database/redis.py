"""
Lightweight in-memory cart/token stores for local development and tests.

This implements just enough of the store interfaces used by the checkout
orchestrator so that it can run without a real Redis instance.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Union

from src.checkout.cart import CartItem
from src.integrations.contracts.interfaces import CartStore, TokenStore


class InMemoryCartStore(CartStore):
    def __init__(self, items: Optional[Iterable[Union[CartItem, Dict[str, Any]]]] = None) -> None:
        self._items: List[CartItem] = [
            item if isinstance(item, CartItem) else CartItem.from_dict(item) for item in (items or [])
        ]
        # Number of clear_cart() calls, handy for assertions
        self.clear_count = 0

    def get_cart(self) -> List[CartItem]:
        return list(self._items)

    def clear_cart(self) -> None:
        self._items = []
        self.clear_count += 1

    def add_item(self, item: CartItem) -> None:
        self._items.append(item)

    def save_cart(self, items: Iterable[CartItem]) -> None:
        self._items = list(items)


class InMemoryTokenStore(TokenStore):
    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token

    def get_token(self) -> Optional[str]:
        return self._token or None
