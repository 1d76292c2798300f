"""
Checkout orchestrator.

Owns the checkout form for one browsing session and drives the submission
state machine: validate -> initiate M-Pesa payment -> clear cart -> redirect.
Every outcome is reported through the notifier; no error escapes `submit()`.

Only one submission is in flight at a time: while `loading` is set, further
`submit()` calls are dropped.

Known limitation: the gateway call has no cancellation or timeout of its own,
and navigating away mid-call is not guarded against.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from src.checkout.cart import CartItem, OrderSummary, cart_total, format_amount, order_summary
from src.checkout.forms import CheckoutForm, PaymentMethod, update_field
from src.checkout.state_machine import (
    CheckoutEffect,
    CheckoutEvent,
    CheckoutSnapshot,
    CheckoutState,
    ClearCart,
    InitiatePayment,
    Notify,
    PaymentFailed,
    PaymentSucceeded,
    Redirect,
    SubmitRequested,
    ValidationFailed,
    ValidationPassed,
    transition,
    unsupported_method_error,
)
from src.checkout.validation import validate_checkout
from src.error_handler import ErrorHandler
from src.integrations.contracts.interfaces import CartStore, Navigator, NotificationKind, Notifier, PaymentGateway
from src.integrations.contracts.payments import build_payment_request

logger = logging.getLogger(__name__)

CART_PATH = "/cart"


class CheckoutInterrupted(Exception):
    message = "Checkout was interrupted. Please try again."


class CheckoutOrchestrator:
    def __init__(
        self,
        cart_store: CartStore,
        gateway: PaymentGateway,
        navigator: Navigator,
        notifier: Notifier,
        *,
        currency: str = "KES",
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.cart_store = cart_store
        self.gateway = gateway
        self.navigator = navigator
        self.notifier = notifier
        self.currency = currency
        self.error_handler = error_handler or ErrorHandler()

        self.form = CheckoutForm()
        self._cart: List[CartItem] = []
        self._snapshot = CheckoutSnapshot()

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> CheckoutSnapshot:
        return self._snapshot

    @property
    def state(self) -> CheckoutState:
        return self._snapshot.state

    @property
    def loading(self) -> bool:
        return self._snapshot.loading

    @property
    def last_error(self) -> Optional[BaseException]:
        return self._snapshot.error

    @property
    def cart(self) -> List[CartItem]:
        return list(self._cart)

    @property
    def total(self) -> float:
        return cart_total(self._cart)

    @property
    def summary(self) -> OrderSummary:
        return order_summary(self._cart, self.currency)

    @property
    def can_submit(self) -> bool:
        return not self.loading and self.form.payment_method.enabled and self.state != CheckoutState.SUCCEEDED

    @property
    def submit_label(self) -> str:
        if self.loading:
            return "Processing..."
        return f"Pay with M-Pesa - {format_amount(self.total, self.currency)}"

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> List[CartItem]:
        """Take the cart snapshot. An empty cart sends the user back to the cart view."""
        self._cart = list(self.cart_store.get_cart() or [])
        self.form = CheckoutForm()
        self._snapshot = CheckoutSnapshot()
        logger.info("Checkout mounted with %d cart line(s)", len(self._cart))

        if not self._cart:
            self.notifier.notify("Your cart is empty", NotificationKind.ERROR)
            self.navigator.redirect(CART_PATH)
        return self.cart

    def update_field(self, name: str, value: Any) -> CheckoutForm:
        self.form = update_field(self.form, name, value)
        return self.form

    def select_payment_method(self, method: Any) -> CheckoutForm:
        """Presentation-level guard: disabled methods cannot be selected."""
        method = PaymentMethod(method)
        if not method.enabled:
            logger.warning("Rejected selection of disabled payment method %s", method.value)
            raise unsupported_method_error(method)
        return self.update_field("payment_method", method)

    def cancel(self) -> None:
        self.navigator.redirect(CART_PATH)

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def submit(self) -> CheckoutSnapshot:
        if self._dispatch(SubmitRequested()) is None:
            logger.info("Ignoring submit while checkout is %s", self.state.value)
            return self._snapshot

        logger.info("Checkout submitted (method=%s, lines=%d)", self.form.payment_method.value, len(self._cart))

        try:
            error = validate_checkout(self._cart, self.form)
            request = None if error is not None else build_payment_request(self._cart, self.form)
        except Exception as exc:
            handled = self.error_handler.handle_exception(exc, context={"stage": "prepare_payment"})
            self._dispatch(PaymentFailed(exc, handled["message"]))
            return self._snapshot

        if error is not None:
            logger.warning("Checkout validation failed: %s", error.message)
            self._dispatch(ValidationFailed(error))
            return self._snapshot

        effects = self._dispatch(ValidationPassed(self.form.payment_method, request))

        for effect in effects or ():
            if isinstance(effect, InitiatePayment):
                await self._initiate(effect)
        return self._snapshot

    async def _initiate(self, effect: InitiatePayment) -> None:
        outcome: Optional[CheckoutEvent] = None
        try:
            response = await self.gateway.initiate(effect.request)
            outcome = PaymentSucceeded(response)
        except Exception as exc:
            handled = self.error_handler.handle_exception(exc, context={"stage": "initiate_payment"})
            outcome = PaymentFailed(exc, handled["message"])
        finally:
            # Leaves SUBMITTING on every path, cancellation included
            if outcome is None:
                interrupted = CheckoutInterrupted()
                outcome = PaymentFailed(interrupted, interrupted.message)
            self._dispatch(outcome)

    def _dispatch(self, event: CheckoutEvent) -> Optional[tuple]:
        """Apply one event. Returns the effects, or None when the event was dropped."""
        before = self._snapshot
        result = transition(before, event)
        if result.snapshot is before:
            return None
        self._snapshot = result.snapshot
        logger.debug("Checkout %s -> %s", before.state.value, result.snapshot.state.value)
        for effect in result.effects:
            if not isinstance(effect, InitiatePayment):
                self._run_effect(effect)
        return result.effects

    def _run_effect(self, effect: CheckoutEffect) -> None:
        try:
            if isinstance(effect, Notify):
                self.notifier.notify(effect.message, effect.kind)
            elif isinstance(effect, ClearCart):
                self.cart_store.clear_cart()
            elif isinstance(effect, Redirect):
                self.navigator.redirect(effect.path)
        except Exception:
            logger.exception("Checkout side effect %s failed", type(effect).__name__)
