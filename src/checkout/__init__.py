"""
Checkout core: cart totals, form state, validation and the submission state machine.

The orchestrator lives in src.checkout.orchestrator and is imported from there.
"""
from .cart import CartItem, cart_total, order_summary
from .errors import (
    CheckoutError,
    CheckoutValidationError,
    EmptyCartError,
    InvalidPhoneError,
    MissingFieldError,
    UnsupportedMethodError,
)
from .forms import CheckoutForm, PaymentMethod
from .validation import validate_checkout

__all__ = [
    'CartItem',
    'cart_total',
    'order_summary',
    'CheckoutError',
    'CheckoutValidationError',
    'EmptyCartError',
    'InvalidPhoneError',
    'MissingFieldError',
    'UnsupportedMethodError',
    'CheckoutForm',
    'PaymentMethod',
    'validate_checkout',
]
