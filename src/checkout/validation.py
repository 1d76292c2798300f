"""Checkout validation rules.

Rules run in order and the first failure wins:
1. the cart must hold at least one line
2. name, phone and delivery address must be non-empty after trimming
3. for M-Pesa, the phone must be a Kenyan mobile number (07XXXXXXXX / 01XXXXXXXX)

`validate_checkout` returns the error rather than raising it; the orchestrator
decides how to report it. Use `raise_if_invalid` where an exception is wanted.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional, Sequence

from src.checkout.cart import CartItem
from src.checkout.errors import CheckoutValidationError, EmptyCartError, InvalidPhoneError, MissingFieldError
from src.checkout.forms import REQUIRED_FIELDS, CheckoutForm, PaymentMethod

_MPESA_PHONE_RE = re.compile(r"^(07|01)[0-9]{8}$")

_FIELD_LABELS = {
    "customer_name": "Full name",
    "customer_phone": "Phone number",
    "delivery_address": "Delivery address",
}


def _as_str(v: Any) -> str:
    return "" if v is None else str(v)


def _strip(v: Any) -> str:
    return _as_str(v).strip()


def add_error(errors: Dict[str, str], field: str, message: str) -> None:
    if field not in errors:
        errors[field] = message


def require_str(form: CheckoutForm, field: str, errors: Dict[str, str]) -> str:
    value = _strip(getattr(form, field))
    if not value:
        add_error(errors, field, f"{_FIELD_LABELS.get(field, field)} is required")
    return value


def is_valid_mpesa_phone(value: str) -> bool:
    """Full match only: no spaces, no +254 prefix."""
    return bool(_MPESA_PHONE_RE.fullmatch(_as_str(value)))


def validate_checkout(cart: Sequence[CartItem], form: CheckoutForm) -> Optional[CheckoutValidationError]:
    if not cart:
        return EmptyCartError()

    errors: Dict[str, str] = {}
    for field in REQUIRED_FIELDS:
        require_str(form, field, errors)
    if errors:
        return MissingFieldError(field_errors=errors)

    if form.payment_method == PaymentMethod.MPESA and not is_valid_mpesa_phone(form.customer_phone):
        return InvalidPhoneError(field_errors={"customer_phone": "Phone number format is not valid"})

    return None


def raise_if_invalid(cart: Sequence[CartItem], form: CheckoutForm) -> None:
    error = validate_checkout(cart, form)
    if error is not None:
        raise error
