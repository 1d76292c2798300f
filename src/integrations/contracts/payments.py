"""
Payment contracts.

Request/response shapes for the payment-initiation endpoint
(POST /payments/create-payment/). One call creates the sale AND starts the
M-Pesa prompt; there is no separate create-sale step.

Used by:
- clients/real_http/payments.py (the HTTP binding)
- clients/mocks/payments.py (fake responses for development/testing)
- src/api/endpoints/mock_payments.py (development backend)
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from src.checkout.cart import CartItem
from src.checkout.forms import CheckoutForm

Identifier = Union[int, str]

PAYMENT_ENDPOINT = "/payments/create-payment/"


class PaymentItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    product: Identifier
    quantity: int = Field(gt=0)
    price_at_sale: float = Field(ge=0)


class PaymentInitiationRequest(BaseModel):
    """The checkout request: a frozen projection of the cart and the form."""

    model_config = ConfigDict(frozen=True)

    phone_number: str
    shipping_address: str
    items: List[PaymentItem]
    # Only set when paying for a sale that already exists
    sale_id: Optional[Identifier] = None

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)


class PaymentInitiationResponse(BaseModel):
    message: str
    sale_id: Identifier
    transaction_id: str
    status: str


def build_payment_request(cart: Sequence[CartItem], form: CheckoutForm) -> PaymentInitiationRequest:
    """Project the cart snapshot and form into a PaymentInitiationRequest.

    Items map 1:1 onto cart lines, in cart order.
    """
    return PaymentInitiationRequest(
        phone_number=form.customer_phone,
        shipping_address=form.delivery_address,
        items=[
            PaymentItem(product=item.product_id, quantity=item.quantity, price_at_sale=item.unit_price)
            for item in cart
        ],
    )


def order_path(sale_id: Identifier) -> str:
    """Order-confirmation view for a sale whose payment is still pending."""
    return f"/order/{sale_id}?payment=pending"
