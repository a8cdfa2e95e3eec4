from __future__ import annotations

from pydantic import ValidationError

from ..api.models import PaymentRequest, PaymentResponse
from ..domain.registry import ServiceRegistry
from ..domain.tokens import generate_token
from ..logging_conf import get_logger

logger = get_logger("service.payment")


# ------------------------
# Errors
# ------------------------
class PaymentError(ValueError):
    """Base class for payment request failures; `code` is a stable machine code."""

    code: str = "payment_error"


class PaymentDecodeError(PaymentError):
    code = "malformed_request"


class ServiceNotRegisteredError(PaymentError):
    code = "service_not_found"

    def __init__(self, service_id: str, method: str) -> None:
        super().__init__(f"{service_id}/{method} is not registered")
        self.service_id = service_id
        self.method = method


# ------------------------
# Use-cases
# ------------------------

def decode_payment_request(payload: bytes | str) -> PaymentRequest:
    """Parse a raw JSON body into a `PaymentRequest`.

    Raises:
        PaymentDecodeError: if the body is not a JSON object of the expected shape.
    """
    try:
        return PaymentRequest.model_validate_json(payload)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        logger.info(
            "payment.decode_failed",
            extra={"event": "payment_decode_failed", "error_count": e.error_count(), "fields": fields},
        )
        raise PaymentDecodeError(f"payment request is malformed: {fields}") from e


def issue_payment_token(*, registry: ServiceRegistry, payload: bytes | str) -> PaymentResponse:
    """Decode, validate against the registry and mint a token.

    Token generation failures propagate as `TokenGenerationError`.
    """
    req = decode_payment_request(payload)

    if not registry.is_service_available(req.service_id, req.method):
        logger.info(
            "payment.not_registered",
            extra={
                "event": "payment_not_registered",
                "service_id": req.service_id,
                "method": req.method,
            },
        )
        raise ServiceNotRegisteredError(req.service_id, req.method)

    token = generate_token()
    logger.info(
        "payment.issued",
        extra={"event": "payment_issued", "service_id": req.service_id, "method": req.method},
    )
    return PaymentResponse(token=token, from_=req.from_, to=req.to, method=req.method)
