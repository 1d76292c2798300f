from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from src.checkout.cart import CartItem
    from src.integrations.contracts.payments import PaymentInitiationRequest, PaymentInitiationResponse


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


# ---------------------------------------------------------------------------
# Collaborators injected into the checkout orchestrator
# ---------------------------------------------------------------------------

class CartStore(ABC):
    """Persistent cart owned outside the checkout core."""

    @abstractmethod
    def get_cart(self) -> List["CartItem"]:
        """Return a snapshot of the current cart lines."""

    @abstractmethod
    def clear_cart(self) -> None:
        """Empty the cart. Must be idempotent."""


class TokenStore(ABC):
    """Read-only access to the session token kept in client storage."""

    @abstractmethod
    def get_token(self) -> Optional[str]:
        """Return the access token, or None when the user is anonymous."""


class Navigator(ABC):
    @abstractmethod
    def redirect(self, path: str) -> None:
        """Navigate the session to another view."""


class Notifier(ABC):
    @abstractmethod
    def notify(self, message: str, kind: NotificationKind) -> None:
        """Surface a message to the user."""


# ---------------------------------------------------------------------------
# Abstract payment gateway
# ---------------------------------------------------------------------------

class PaymentGateway(ABC):
    """Every payment-initiation backend (real or mock) implements this."""

    @abstractmethod
    async def initiate(self, request: "PaymentInitiationRequest") -> "PaymentInitiationResponse":
        """Create the sale and start the mobile money payment in one call."""
