"""
Integrations layer.
This package contains all code used to communicate with external systems:
- the storefront backend's payment-initiation endpoint (M-Pesa)
- the cart/token stores, router and notification layer the checkout is given

Key rule:
- The checkout MUST NOT call external APIs directly.
- It calls a PaymentGateway (under src/integrations/clients).
- We use MOCK clients during development and swap to REAL_HTTP clients when a backend URL is set.

Switching implementations:
- The selection of mock vs real clients happens in ONE place (src/integrations/factory.py).
"""

from .contracts.interfaces import (
    CartStore,
    Navigator,
    NotificationKind,
    Notifier,
    PaymentGateway,
    TokenStore,
)

__all__ = [
    "CartStore", "Navigator", "NotificationKind", "Notifier",
    "PaymentGateway", "TokenStore",
]
