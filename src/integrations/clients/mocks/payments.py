"""
Mock Payments Client.

⚠️  Development/testing only. Does NOT make any network calls.
    Mirrors the storefront backend's create-payment behaviour:
    - returns a pending STK push with a fresh sale_id and transaction_id
    - rejects empty item lists and malformed phone numbers
    - simulates "Insufficient balance" for configured phone numbers
    Swap for clients/real_http/payments.py once a backend URL is configured.
"""

import itertools
import logging
import uuid
from typing import Iterable, List, Optional

from src.checkout.validation import is_valid_mpesa_phone
from src.integrations.clients.real_http.request_client import RequestError
from src.integrations.contracts.interfaces import PaymentGateway
from src.integrations.contracts.payments import PaymentInitiationRequest, PaymentInitiationResponse

logger = logging.getLogger(__name__)


class MockPaymentGateway(PaymentGateway):
    """
    Mock M-Pesa payment gateway.

    Parameters
    ----------
    first_sale_id : int
        sale_id handed out to the first successful call. Default 1.
    insufficient_balance_phones : iterable of str
        Phone numbers whose prompt is declined with "Insufficient balance".
    fail_with : str, optional
        When set, every call fails with this message (simulates an outage).
    """

    def __init__(
        self,
        first_sale_id: int = 1,
        insufficient_balance_phones: Iterable[str] = (),
        fail_with: Optional[str] = None,
    ):
        self._sale_ids = itertools.count(first_sale_id)
        self._insufficient_balance_phones = set(insufficient_balance_phones)
        self.fail_with = fail_with

        # In-memory log of every request received (reset on restart)
        self.requests: List[PaymentInitiationRequest] = []
        self.responses: List[PaymentInitiationResponse] = []

        logger.info("[MPESA MOCK] Gateway initialised (first_sale_id=%s)", first_sale_id)

    def _new_transaction_id(self) -> str:
        return f"ws_CO_{uuid.uuid4().hex[:12].upper()}"

    async def initiate(self, request: PaymentInitiationRequest) -> PaymentInitiationResponse:
        self.requests.append(request)
        logger.info("[MPESA MOCK] Initiating payment for %d item(s)", len(request.items))

        if self.fail_with:
            raise RequestError(self.fail_with, status_code=502)
        if not request.items:
            raise RequestError("At least one item is required", status_code=400)
        if not is_valid_mpesa_phone(request.phone_number):
            raise RequestError("Invalid phone number", status_code=400)
        if request.phone_number in self._insufficient_balance_phones:
            raise RequestError("Insufficient balance", status_code=402)

        response = PaymentInitiationResponse(
            message="STK push sent",
            sale_id=request.sale_id if request.sale_id is not None else next(self._sale_ids),
            transaction_id=self._new_transaction_id(),
            status="pending",
        )
        self.responses.append(response)
        logger.info("[MPESA MOCK] Sale %s → %s", response.sale_id, response.status)
        return response
