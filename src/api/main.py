"""
FastAPI application - development storefront backend

Serves the payment-initiation endpoint the checkout client talks to, so the
client can be exercised end-to-end without the real backend:

  uvicorn src.api.main:app --reload
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os
from typing import Optional

from fastapi import FastAPI

from src.api.endpoints.mock_payments import router as payments_router
from src.integrations.clients.mocks.payments import MockPaymentGateway

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(gateway: Optional[MockPaymentGateway] = None) -> FastAPI:
    app = FastAPI(
        title="Storefront Development Backend",
        description="Mock payment-initiation backend for the checkout client",
        version="1.0.0",
    )

    if gateway is None:
        declined = [p.strip() for p in os.getenv("MOCK_INSUFFICIENT_BALANCE_PHONES", "").split(",") if p.strip()]
        gateway = MockPaymentGateway(insufficient_balance_phones=declined)
    app.state.payment_gateway = gateway

    app.include_router(payments_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    logger.info("Development backend ready")
    return app


app = create_app()
