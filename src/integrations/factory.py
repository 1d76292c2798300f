"""
Single place where mock vs real payment clients and session stores are chosen.
"""

import logging
from typing import Optional, Tuple

import httpx

from src.database.redis import InMemoryCartStore, InMemoryTokenStore
from src.database.redis_real import RedisCartStore, RedisTokenStore
from src.integrations.clients.mocks.payments import MockPaymentGateway
from src.integrations.clients.real_http.payments import HttpPaymentGateway
from src.integrations.clients.real_http.request_client import RequestClient
from src.integrations.contracts.interfaces import CartStore, PaymentGateway, TokenStore
from src.utils.config_loader import CheckoutConfig

logger = logging.getLogger(__name__)


def build_request_client(
    config: CheckoutConfig,
    token_store: Optional[TokenStore] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RequestClient:
    return RequestClient(
        config.api_base_url,
        token_store,
        timeout_seconds=config.request_timeout_seconds,
        transport=transport,
    )


def select_payment_gateway(
    config: CheckoutConfig,
    token_store: Optional[TokenStore] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> PaymentGateway:
    if config.use_real_integrations():
        if not config.api_base_url:
            raise ValueError("CHECKOUT_API_BASE_URL is not configured.")
        logger.info("Using HTTP payment gateway at %s", config.api_base_url)
        client = build_request_client(config, token_store, transport)
        return HttpPaymentGateway(client, endpoint=config.payment_endpoint)

    logger.info("Using mock payment gateway")
    return MockPaymentGateway()


def build_session_stores(
    config: CheckoutConfig,
    session_id: str,
    *,
    token: Optional[str] = None,
    redis_client=None,
) -> Tuple[CartStore, TokenStore]:
    """
    Cart and token stores for one browsing session.

    With a redis_url (or an explicit client) both live in Redis under
    `{cart_key}:{session_id}` and `{token_key}:{session_id}`; `token` is
    ignored since the token is read from Redis. Otherwise in-memory stores
    are used and `token` seeds the token store.
    """
    if config.redis_url or redis_client is not None:
        logger.info("Using Redis session stores for %s", session_id)
        return (
            RedisCartStore(session_id, url=config.redis_url, cart_key=config.cart_key, client=redis_client),
            RedisTokenStore(session_id, url=config.redis_url, token_key=config.token_key, client=redis_client),
        )

    logger.info("No REDIS_URL configured; using in-memory session stores")
    return InMemoryCartStore(), InMemoryTokenStore(token)
