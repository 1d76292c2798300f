"""Checkout error taxonomy.

Every error carries a user-facing ``message``; the orchestrator reports it
through the notifier and returns to a resubmittable state.
"""

from __future__ import annotations

from typing import Dict, Optional


class CheckoutError(Exception):
    message: str = "Checkout failed"

    def __init__(self, message: Optional[str] = None) -> None:
        if message:
            self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class CheckoutValidationError(CheckoutError):
    """Local validation failure. Never reaches the network.

    Attributes:
        field_errors: mapping of field name -> human-readable error message.
    """

    message = "Validation failed"

    def __init__(self, message: Optional[str] = None, field_errors: Optional[Dict[str, str]] = None) -> None:
        super().__init__(message)
        self.field_errors: Dict[str, str] = dict(field_errors or {})


class EmptyCartError(CheckoutValidationError):
    message = "Your cart is empty"


class MissingFieldError(CheckoutValidationError):
    message = "Please fill all required fields"


class InvalidPhoneError(CheckoutValidationError):
    message = "Enter a valid Kenyan phone number (0712345678)"


class UnsupportedMethodError(CheckoutError):
    """The payment method is selectable but not wired to a backend flow yet."""

    message = "This payment method is coming soon"

    def __init__(self, method: str, message: Optional[str] = None) -> None:
        super().__init__(message)
        self.method = method


class InvalidTransitionError(CheckoutError):
    message = "Invalid checkout transition"
