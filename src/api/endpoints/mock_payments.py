"""
Development backend for POST /payments/create-payment/.
Backed by MockPaymentGateway; remove or disable in production.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from src.api.dependencies import bearer_token_protection
from src.integrations.clients.mocks.payments import MockPaymentGateway
from src.integrations.clients.real_http.request_client import RequestError
from src.integrations.contracts.payments import PaymentInitiationRequest

router = APIRouter(prefix="/payments", tags=["Mock Payments"], dependencies=[Depends(bearer_token_protection)])


def get_gateway(request: Request) -> MockPaymentGateway:
    return request.app.state.payment_gateway


@router.post("/create-payment/", status_code=201)
async def create_payment(payload: Dict[str, Any], gateway: MockPaymentGateway = Depends(get_gateway)):
    """
    Create a sale and send the M-Pesa prompt.

    Example payload:
    {
        "phone_number": "0712345678",
        "shipping_address": "Moi Avenue, Nairobi",
        "items": [{"product": 1, "quantity": 2, "price_at_sale": 100}]
    }
    """
    try:
        request = PaymentInitiationRequest.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid payment request: {exc.error_count()} error(s)") from exc

    try:
        response = await gateway.initiate(request)
    except RequestError as exc:
        raise HTTPException(status_code=exc.status_code or 400, detail=exc.message) from exc
    return response.model_dump()
