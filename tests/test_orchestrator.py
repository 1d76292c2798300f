"""CheckoutOrchestrator end-to-end behaviour against injected stores and gateways."""

import asyncio
import json

import httpx
import pytest

from src.checkout.cart import CartItem
from src.checkout.errors import EmptyCartError, InvalidPhoneError, UnsupportedMethodError
from src.checkout.forms import PaymentMethod
from src.checkout.orchestrator import CheckoutInterrupted, CheckoutOrchestrator
from src.checkout.state_machine import MPESA_PROMPT_SENT, CheckoutState
from src.database.redis import InMemoryCartStore, InMemoryTokenStore
from src.integrations.clients.real_http.payments import HttpPaymentGateway
from src.integrations.clients.real_http.request_client import RequestClient, TransportError
from src.integrations.contracts.interfaces import PaymentGateway
from src.integrations.contracts.payments import PaymentInitiationResponse


class BlockingGateway(PaymentGateway):
    def __init__(self):
        self.release = asyncio.Event()
        self.calls = 0

    async def initiate(self, request):
        self.calls += 1
        await self.release.wait()
        return PaymentInitiationResponse(message="ok", sale_id=9, transaction_id="tx9", status="pending")


class ExplodingGateway(PaymentGateway):
    def __init__(self, exc):
        self.exc = exc
        self.calls = 0

    async def initiate(self, request):
        self.calls += 1
        raise self.exc


def _fill_valid_form(checkout):
    checkout.update_field("customer_name", "Jane Wanjiku")
    checkout.update_field("customer_phone", "0712345678")
    checkout.update_field("delivery_address", "Moi Avenue, Nairobi")


# ---------------------------------------------------------------------------
# Mount / form
# ---------------------------------------------------------------------------

def test_mount_with_empty_cart_sends_user_back(gateway, navigator, notifier):
    checkout = CheckoutOrchestrator(InMemoryCartStore(), gateway, navigator, notifier)
    assert checkout.mount() == []
    assert notifier.errors == ["Your cart is empty"]
    assert navigator.paths == ["/cart"]


def test_mount_takes_a_cart_snapshot(checkout, cart_store, cart_items):
    cart_store.add_item(CartItem(product_id="p3", product_name="Salt", quantity=1, unit_price=20))
    # Snapshot was taken at mount; later store changes are not seen
    assert checkout.cart == cart_items
    assert checkout.total == 550
    assert checkout.summary.formatted_total == "KES 550"


def test_submit_label_and_can_submit(checkout):
    assert checkout.submit_label == "Pay with M-Pesa - KES 550"
    assert checkout.can_submit is True

    checkout.update_field("payment_method", "cash")
    assert checkout.can_submit is False


def test_disabled_methods_cannot_be_selected(checkout):
    with pytest.raises(UnsupportedMethodError) as exc_info:
        checkout.select_payment_method("card")
    assert exc_info.value.message == "Card payments coming soon"
    assert checkout.form.payment_method is PaymentMethod.MPESA

    checkout.select_payment_method("mpesa")
    assert checkout.form.payment_method is PaymentMethod.MPESA


def test_cancel_goes_back_to_cart(checkout, navigator):
    checkout.cancel()
    assert navigator.paths == ["/cart"]


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_successful_mpesa_submission(checkout, gateway, cart_store, navigator, notifier, cart_items):
    snapshot = await checkout.submit()

    assert snapshot.state == CheckoutState.SUCCEEDED
    assert snapshot.loading is False
    assert snapshot.sale_id == 55

    assert len(gateway.requests) == 1
    sent = gateway.requests[0]
    assert sent.phone_number == "0712345678"
    assert sent.shipping_address == "Moi Avenue, Nairobi"
    assert [(i.product, i.quantity, i.price_at_sale) for i in sent.items] == [
        (item.product_id, item.quantity, item.unit_price) for item in cart_items
    ]

    assert cart_store.clear_count == 1
    assert cart_store.get_cart() == []
    assert navigator.paths == ["/order/55?payment=pending"]
    assert notifier.successes == [MPESA_PROMPT_SENT]


@pytest.mark.asyncio
async def test_succeeded_is_terminal(checkout, gateway, cart_store):
    await checkout.submit()
    await checkout.submit()

    assert len(gateway.requests) == 1
    assert cart_store.clear_count == 1
    assert checkout.state == CheckoutState.SUCCEEDED


@pytest.mark.asyncio
async def test_empty_cart_submission_never_reaches_network(gateway, navigator, notifier):
    checkout = CheckoutOrchestrator(InMemoryCartStore(), gateway, navigator, notifier)
    checkout.mount()
    _fill_valid_form(checkout)

    snapshot = await checkout.submit()

    assert snapshot.state == CheckoutState.FAILED
    assert isinstance(snapshot.error, EmptyCartError)
    assert gateway.requests == []
    assert snapshot.loading is False


@pytest.mark.asyncio
async def test_invalid_phone_is_reported_and_resubmission_allowed(checkout, gateway, notifier, navigator):
    checkout.update_field("customer_phone", "0812345678")
    snapshot = await checkout.submit()

    assert snapshot.state == CheckoutState.FAILED
    assert isinstance(snapshot.error, InvalidPhoneError)
    assert notifier.errors == ["Enter a valid Kenyan phone number (0712345678)"]
    assert gateway.requests == []

    checkout.update_field("customer_phone", "0112345678")
    snapshot = await checkout.submit()

    assert snapshot.state == CheckoutState.SUCCEEDED
    assert snapshot.error is None
    assert navigator.paths == ["/order/55?payment=pending"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,message",
    [("cash", "Cash on delivery coming soon"), ("card", "Card payments coming soon")],
)
async def test_placeholder_methods_are_rejected_at_submit(checkout, gateway, cart_store, notifier, method, message):
    # Bypasses the selection guard, as a tampered form would
    checkout.update_field("payment_method", method)
    snapshot = await checkout.submit()

    assert snapshot.state == CheckoutState.FAILED
    assert isinstance(snapshot.error, UnsupportedMethodError)
    assert snapshot.loading is False
    assert gateway.requests == []
    assert cart_store.clear_count == 0
    assert notifier.errors == [message]


@pytest.mark.asyncio
async def test_gateway_error_is_notified_and_cart_kept(cart_store, navigator, notifier):
    gateway = ExplodingGateway(TransportError())
    checkout = CheckoutOrchestrator(cart_store, gateway, navigator, notifier)
    checkout.mount()
    _fill_valid_form(checkout)

    snapshot = await checkout.submit()

    assert snapshot.state == CheckoutState.FAILED
    assert snapshot.loading is False
    assert notifier.errors == ["Unable to reach the payment service. Please try again."]
    assert cart_store.clear_count == 0
    assert navigator.paths == []


@pytest.mark.asyncio
async def test_unexpected_exception_still_resets_loading(cart_store, navigator, notifier):
    gateway = ExplodingGateway(KeyError("sale"))
    checkout = CheckoutOrchestrator(cart_store, gateway, navigator, notifier)
    checkout.mount()
    _fill_valid_form(checkout)

    snapshot = await checkout.submit()

    assert snapshot.state == CheckoutState.FAILED
    assert snapshot.loading is False
    assert notifier.errors == ["Checkout failed"]

    # And the user can try again
    await checkout.submit()
    assert gateway.calls == 2


@pytest.mark.asyncio
async def test_unprojectable_cart_row_fails_without_sticking(navigator, notifier):
    cart_store = InMemoryCartStore([CartItem(product_id=None, product_name="", quantity=1, unit_price=10)])
    gateway = ExplodingGateway(AssertionError("gateway must not be called"))
    checkout = CheckoutOrchestrator(cart_store, gateway, navigator, notifier)
    checkout.mount()
    _fill_valid_form(checkout)

    snapshot = await checkout.submit()

    assert snapshot.state == CheckoutState.FAILED
    assert snapshot.loading is False
    assert notifier.errors == ["Checkout failed"]
    assert gateway.calls == 0

    # Not stuck in validation: the next submit is processed, not dropped
    await checkout.submit()
    assert checkout.state == CheckoutState.FAILED
    assert notifier.errors == ["Checkout failed", "Checkout failed"]


@pytest.mark.asyncio
async def test_second_submit_is_dropped_while_in_flight(cart_store, navigator, notifier):
    gateway = BlockingGateway()
    checkout = CheckoutOrchestrator(cart_store, gateway, navigator, notifier)
    checkout.mount()
    _fill_valid_form(checkout)

    first = asyncio.create_task(checkout.submit())
    while not checkout.loading:
        await asyncio.sleep(0)

    assert checkout.submit_label == "Processing..."
    assert checkout.can_submit is False
    snapshot = await checkout.submit()
    assert snapshot.state == CheckoutState.SUBMITTING

    gateway.release.set()
    final = await first

    assert gateway.calls == 1
    assert final.state == CheckoutState.SUCCEEDED
    assert final.loading is False
    assert navigator.paths == ["/order/9?payment=pending"]


@pytest.mark.asyncio
async def test_cancelled_submission_resets_loading(cart_store, navigator, notifier):
    gateway = BlockingGateway()
    checkout = CheckoutOrchestrator(cart_store, gateway, navigator, notifier)
    checkout.mount()
    _fill_valid_form(checkout)

    task = asyncio.create_task(checkout.submit())
    while not checkout.loading:
        await asyncio.sleep(0)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert checkout.loading is False
    assert checkout.state == CheckoutState.FAILED
    assert isinstance(checkout.last_error, CheckoutInterrupted)
    assert cart_store.clear_count == 0


@pytest.mark.asyncio
async def test_failing_notifier_does_not_break_checkout(cart_store, gateway, navigator):
    class BrokenNotifier:
        def notify(self, message, kind):
            raise RuntimeError("toast layer down")

    checkout = CheckoutOrchestrator(cart_store, gateway, navigator, BrokenNotifier())
    checkout.mount()
    _fill_valid_form(checkout)

    snapshot = await checkout.submit()

    assert snapshot.state == CheckoutState.SUCCEEDED
    assert cart_store.clear_count == 1
    assert navigator.paths == ["/order/55?payment=pending"]


@pytest.mark.asyncio
async def test_reference_scenario_over_http(navigator, notifier):
    """p1 x 2 @ 100, phone 0712345678, M-Pesa, backend answers sale 55."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"sale_id": 55, "transaction_id": "tx1", "status": "pending", "message": "ok"},
        )

    cart_store = InMemoryCartStore([{"product_id": "p1", "product_name": "Maize flour", "quantity": 2, "unit_price": 100}])
    client = RequestClient("https://shop.test", InMemoryTokenStore("jwt"), transport=httpx.MockTransport(handler))
    checkout = CheckoutOrchestrator(cart_store, HttpPaymentGateway(client), navigator, notifier)
    checkout.mount()
    _fill_valid_form(checkout)

    assert checkout.total == 200
    snapshot = await checkout.submit()

    assert len(seen) == 1
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/payments/create-payment/"
    assert seen[0].headers["Authorization"] == "Bearer jwt"
    body = json.loads(seen[0].content)
    assert body["items"] == [{"product": "p1", "quantity": 2, "price_at_sale": 100}]
    assert "sale_id" not in body

    assert snapshot.state == CheckoutState.SUCCEEDED
    assert navigator.paths == ["/order/55?payment=pending"]
    assert cart_store.clear_count == 1
