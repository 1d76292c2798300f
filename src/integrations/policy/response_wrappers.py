from __future__ import annotations

from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from src.integrations.contracts.payments import PaymentInitiationResponse

ModelT = TypeVar("ModelT", bound=BaseModel)


class IntegrationResponseError(ValueError):
    def __init__(self, message: str, *, payload: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.payload = payload if payload is not None else {}


def normalize_payment_initiation_response(raw: Any) -> PaymentInitiationResponse:
    """Validate a create-payment response.

    The backend creates the sale and the payment attempt together, so a
    response missing either the sale id or the transaction id is rejected.
    """
    if not isinstance(raw, dict):
        raise IntegrationResponseError(
            f"Expected a JSON object from the payment service; got {type(raw).__name__}.",
            payload=raw,
        )

    sale_id = _first_non_empty(raw, "sale_id", "saleId")
    transaction_id = _first_non_empty(raw, "transaction_id", "transactionId", "checkout_request_id")
    status = str(_first_non_empty(raw, "status", "payment_status", default="pending")).lower()
    message = str(_first_non_empty(raw, "message", "detail", default="Payment request accepted"))

    return build_model(
        PaymentInitiationResponse,
        {
            "message": message,
            "sale_id": sale_id,
            "transaction_id": str(transaction_id),
            "status": status,
        },
        raw,
    )


def _first_non_empty(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    if default is not None:
        return default
    raise IntegrationResponseError(f"Missing required field. Checked keys: {', '.join(keys)}", payload=data)


def build_model(model_type: Type[ModelT], payload: Any, raw: Any) -> ModelT:
    try:
        return model_type.model_validate(payload)
    except ValidationError as exc:
        raise IntegrationResponseError(f"Response validation failed: {exc}", payload=raw) from exc
