"""
Checkout form state and the closed set of payment methods.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Tuple


class PaymentMethod(str, Enum):
    MPESA = "mpesa"
    CASH = "cash"
    CARD = "card"

    @property
    def label(self) -> str:
        return _METHOD_LABELS[self]

    @property
    def enabled(self) -> bool:
        """Only M-Pesa is wired to a live backend; the others are placeholders."""
        return self in _ENABLED_METHODS


_METHOD_LABELS: Dict[PaymentMethod, str] = {
    PaymentMethod.MPESA: "M-Pesa",
    PaymentMethod.CASH: "Cash on Delivery",
    PaymentMethod.CARD: "Card Payment",
}

_ENABLED_METHODS = frozenset({PaymentMethod.MPESA})

REQUIRED_FIELDS: Tuple[str, ...] = ("customer_name", "customer_phone", "delivery_address")


@dataclass(frozen=True)
class CheckoutForm:
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    delivery_address: str = ""
    notes: str = ""
    payment_method: PaymentMethod = PaymentMethod.MPESA


FORM_FIELDS = frozenset(f.name for f in fields(CheckoutForm))


def update_field(form: CheckoutForm, name: str, value: Any) -> CheckoutForm:
    """Return a copy of the form with one field changed.

    Unknown field names raise ValueError; payment_method values are coerced
    to PaymentMethod.
    """
    if name not in FORM_FIELDS:
        raise ValueError(f"Unknown checkout field '{name}'")
    if name == "payment_method":
        value = PaymentMethod(value)
    else:
        value = "" if value is None else str(value)
    return replace(form, **{name: value})
