"""Error handling helpers for the checkout submission boundary."""
from typing import Any, Dict, Optional
import logging

from src.checkout.errors import CheckoutError
from src.integrations.clients.real_http.request_client import RequestError
from src.integrations.policy.response_wrappers import IntegrationResponseError

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Checkout failed"

_EXPECTED = (CheckoutError, RequestError, IntegrationResponseError)


class ErrorHandler:
    def user_message(self, exc: BaseException) -> str:
        # Unexpected exceptions never leak their text to the user
        if not isinstance(exc, _EXPECTED):
            return FALLBACK_MESSAGE
        return getattr(exc, "message", None) or str(exc) or FALLBACK_MESSAGE

    def handle_exception(self, exc: BaseException, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if isinstance(exc, _EXPECTED):
            logger.warning("Checkout error: %s", exc)
        else:
            logger.error("Unhandled exception during checkout: %s", exc, exc_info=exc)
        return {
            "message": self.user_message(exc),
            "expected": isinstance(exc, _EXPECTED),
            "metadata": {"error": str(exc), "type": type(exc).__name__, "context": context or {}},
        }
