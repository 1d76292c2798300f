"""Pytest fixtures for checkout tests."""

import pytest

from src.checkout.cart import CartItem
from src.checkout.orchestrator import CheckoutOrchestrator
from src.database.redis import InMemoryCartStore, InMemoryTokenStore
from src.integrations.clients.mocks.payments import MockPaymentGateway
from src.integrations.clients.mocks.ui import LoggingNotifier, RecordingNavigator


@pytest.fixture(autouse=True)
def _clean_checkout_env(monkeypatch):
    for name in (
        "CHECKOUT_API_BASE_URL",
        "CHECKOUT_REQUEST_TIMEOUT",
        "CHECKOUT_CURRENCY",
        "INTEGRATIONS_MODE",
        "REDIS_URL",
        "MOCK_BACKEND_TOKENS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cart_items():
    return [
        CartItem(product_id="p1", product_name="Maize flour", quantity=2, unit_price=100),
        CartItem(product_id="p2", product_name="Cooking oil", quantity=1, unit_price=350),
    ]


@pytest.fixture
def cart_store(cart_items):
    return InMemoryCartStore(cart_items)


@pytest.fixture
def token_store():
    return InMemoryTokenStore("secret-token")


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest.fixture
def notifier():
    return LoggingNotifier()


@pytest.fixture
def gateway():
    return MockPaymentGateway(first_sale_id=55)


@pytest.fixture
def checkout(cart_store, gateway, navigator, notifier):
    """Mounted orchestrator with a valid M-Pesa form."""
    orchestrator = CheckoutOrchestrator(cart_store, gateway, navigator, notifier)
    orchestrator.mount()
    orchestrator.update_field("customer_name", "Jane Wanjiku")
    orchestrator.update_field("customer_phone", "0712345678")
    orchestrator.update_field("delivery_address", "Moi Avenue, Nairobi")
    return orchestrator
