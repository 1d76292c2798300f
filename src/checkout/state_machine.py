"""
Checkout submission state machine.

`transition(snapshot, event)` is pure: it returns the next snapshot plus the
side effects the caller must run (notify, call the gateway, clear the cart,
redirect). Nothing here touches a store, the network or the UI.

    IDLE/FAILED --submit--> VALIDATING
    VALIDATING --invalid|error--> FAILED
    VALIDATING --ok(mpesa)--> SUBMITTING --paid--> SUCCEEDED
                                         --error--> FAILED
    VALIDATING --ok(cash|card)--> FAILED (coming soon, no network call)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple, Union

from src.checkout.errors import CheckoutValidationError, InvalidTransitionError, UnsupportedMethodError
from src.checkout.forms import PaymentMethod
from src.integrations.contracts.interfaces import NotificationKind
from src.integrations.contracts.payments import Identifier, PaymentInitiationRequest, PaymentInitiationResponse, order_path

MPESA_PROMPT_SENT = "M-Pesa prompt sent. Check your phone and enter PIN."

_COMING_SOON = {
    PaymentMethod.CASH: "Cash on delivery coming soon",
    PaymentMethod.CARD: "Card payments coming soon",
}


class CheckoutState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class CheckoutSnapshot:
    state: CheckoutState = CheckoutState.IDLE
    loading: bool = False
    error: Optional[BaseException] = None
    sale_id: Optional[Identifier] = None

    @property
    def error_message(self) -> Optional[str]:
        return getattr(self.error, "message", None) if self.error is not None else None


# --- Events -----------------------------------------------------------------

@dataclass(frozen=True)
class SubmitRequested:
    pass


@dataclass(frozen=True)
class ValidationFailed:
    error: CheckoutValidationError


@dataclass(frozen=True)
class ValidationPassed:
    method: PaymentMethod
    request: PaymentInitiationRequest


@dataclass(frozen=True)
class PaymentSucceeded:
    response: PaymentInitiationResponse


@dataclass(frozen=True)
class PaymentFailed:
    error: BaseException
    message: str


CheckoutEvent = Union[SubmitRequested, ValidationFailed, ValidationPassed, PaymentSucceeded, PaymentFailed]


# --- Effects ----------------------------------------------------------------

@dataclass(frozen=True)
class Notify:
    message: str
    kind: NotificationKind


@dataclass(frozen=True)
class InitiatePayment:
    request: PaymentInitiationRequest


@dataclass(frozen=True)
class ClearCart:
    pass


@dataclass(frozen=True)
class Redirect:
    path: str


CheckoutEffect = Union[Notify, InitiatePayment, ClearCart, Redirect]


@dataclass(frozen=True)
class Transition:
    snapshot: CheckoutSnapshot
    effects: Tuple[CheckoutEffect, ...] = field(default_factory=tuple)


def unsupported_method_error(method: PaymentMethod) -> UnsupportedMethodError:
    return UnsupportedMethodError(method.value, _COMING_SOON.get(method))


def _fail(snapshot: CheckoutSnapshot, error: BaseException, message: str) -> Transition:
    return Transition(
        replace(snapshot, state=CheckoutState.FAILED, loading=False, error=error),
        (Notify(message, NotificationKind.ERROR),),
    )


def transition(snapshot: CheckoutSnapshot, event: CheckoutEvent) -> Transition:
    state = snapshot.state

    if isinstance(event, SubmitRequested):
        if state in (CheckoutState.IDLE, CheckoutState.FAILED):
            return Transition(replace(snapshot, state=CheckoutState.VALIDATING, error=None))
        # In flight or already done: re-entrant submits are dropped
        return Transition(snapshot)

    if state == CheckoutState.VALIDATING:
        if isinstance(event, ValidationFailed):
            return _fail(snapshot, event.error, event.error.message)
        if isinstance(event, PaymentFailed):
            return _fail(snapshot, event.error, event.message)
        if isinstance(event, ValidationPassed):
            if event.method == PaymentMethod.MPESA:
                return Transition(
                    replace(snapshot, state=CheckoutState.SUBMITTING, loading=True),
                    (InitiatePayment(event.request),),
                )
            # Not implemented arm: selectable, but rejected before any network call
            error = unsupported_method_error(event.method)
            return _fail(snapshot, error, error.message)

    if state == CheckoutState.SUBMITTING:
        if isinstance(event, PaymentSucceeded):
            sale_id = event.response.sale_id
            return Transition(
                replace(snapshot, state=CheckoutState.SUCCEEDED, loading=False, error=None, sale_id=sale_id),
                (
                    Notify(MPESA_PROMPT_SENT, NotificationKind.SUCCESS),
                    ClearCart(),
                    Redirect(order_path(sale_id)),
                ),
            )
        if isinstance(event, PaymentFailed):
            return _fail(snapshot, event.error, event.message)

    raise InvalidTransitionError(f"Invalid checkout transition: {state.value} on {type(event).__name__}")
