"""
Real Payments HTTP Client.

Used when the storefront backend URL is configured. One POST to
/payments/create-payment/ creates the sale and sends the M-Pesa prompt.
"""

from __future__ import annotations

import logging
from typing import Optional

from src.integrations.clients.real_http.request_client import RequestClient
from src.integrations.contracts.interfaces import PaymentGateway
from src.integrations.contracts.payments import (
    PAYMENT_ENDPOINT,
    PaymentInitiationRequest,
    PaymentInitiationResponse,
)
from src.integrations.policy.response_wrappers import normalize_payment_initiation_response

logger = logging.getLogger(__name__)


def mask_phone(phone: str) -> str:
    if len(phone) <= 4:
        return "*" * len(phone)
    return "*" * (len(phone) - 4) + phone[-4:]


class HttpPaymentGateway(PaymentGateway):
    def __init__(self, client: RequestClient, endpoint: Optional[str] = None) -> None:
        self.client = client
        self.endpoint = endpoint or PAYMENT_ENDPOINT

    async def initiate(self, request: PaymentInitiationRequest) -> PaymentInitiationResponse:
        payload = request.to_payload()
        logger.info(f"Initiating M-Pesa payment for {len(request.items)} item(s)")
        logger.debug("Request payload: %s", {**payload, "phone_number": mask_phone(request.phone_number)})

        data = await self.client.request(self.endpoint, method="POST", json=payload)
        response = normalize_payment_initiation_response(data)

        logger.info(f"Payment initiated: sale_id={response.sale_id} status={response.status}")
        return response
