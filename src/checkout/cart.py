"""
Cart line items and totals.

The cart itself lives in an external store; the checkout only ever reads a
snapshot of it.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Union

DEFAULT_CURRENCY = "KES"


def _as_quantity(value: Any) -> Any:
    # Stored rows may carry "2" or 2.0; fractional quantities are rejected by CartItem
    if isinstance(value, str):
        return int(value.strip())
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass(frozen=True)
class CartItem:
    product_id: Union[int, str]
    product_name: str
    quantity: int
    unit_price: float

    def __post_init__(self) -> None:
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity <= 0:
            raise ValueError(f"quantity must be a positive integer; got {self.quantity!r}")
        if self.unit_price < 0:
            raise ValueError(f"unit_price must be non-negative; got {self.unit_price!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartItem":
        """Build a line from a stored cart row."""
        return cls(
            product_id=data["product_id"],
            product_name=str(data.get("product_name") or ""),
            quantity=_as_quantity(data["quantity"]),
            unit_price=float(data["unit_price"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
        }


@dataclass(frozen=True)
class SummaryLine:
    label: str
    amount: str


@dataclass(frozen=True)
class OrderSummary:
    lines: List[SummaryLine]
    total: float
    formatted_total: str


def line_subtotal(item: CartItem) -> float:
    return item.quantity * item.unit_price


def cart_total(items: Iterable[CartItem]) -> float:
    """Sum of quantity x unit_price over all lines; 0 for an empty cart."""
    return sum((line_subtotal(item) for item in items), 0)


def format_amount(amount: float, currency: str = DEFAULT_CURRENCY) -> str:
    # Half-units round up: 2.5 -> 3
    whole = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{currency} {whole}"


def order_summary(items: Iterable[CartItem], currency: str = DEFAULT_CURRENCY) -> OrderSummary:
    items = list(items)
    lines = [
        SummaryLine(label=f"{item.product_name} × {item.quantity}", amount=format_amount(line_subtotal(item), currency))
        for item in items
    ]
    total = cart_total(items)
    return OrderSummary(lines=lines, total=total, formatted_total=format_amount(total, currency))
