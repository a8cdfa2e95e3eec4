from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from ..domain.registry import ServiceRegistry
from ..domain.tokens import TokenGenerationError
from ..logging_conf import get_logger
from ..service.payment_service import (
    PaymentDecodeError,
    ServiceNotRegisteredError,
    issue_payment_token,
)
from .models import PaymentResponse

router = APIRouter()
logger = get_logger("api")


def get_registry(request: Request) -> ServiceRegistry:
    """Return the registry the app was built with."""
    return request.app.state.registry


@router.post(
    "/payment",
    response_model=PaymentResponse,
    summary="Issue a payment token for a registered service method",
    responses={
        400: {"description": "Malformed request body", "content": {"text/plain": {}}},
        404: {"description": "Service or method not registered", "content": {"text/plain": {}}},
        500: {"description": "Token generation failed", "content": {"text/plain": {}}},
    },
)
async def create_payment(request: Request, registry: ServiceRegistry = Depends(get_registry)):
    """Validate the requested service method and return a fresh token."""
    # The body is decoded by hand so a malformed payload maps to a plain 400.
    payload = await request.body()
    try:
        out = issue_payment_token(registry=registry, payload=payload)
    except PaymentDecodeError:
        return PlainTextResponse("malformed request", status_code=status.HTTP_400_BAD_REQUEST)
    except ServiceNotRegisteredError:
        return PlainTextResponse(
            "service or method not found", status_code=status.HTTP_404_NOT_FOUND
        )
    except TokenGenerationError:
        logger.exception("payment.token_failed", extra={"event": "payment_token_failed"})
        return PlainTextResponse(
            "token generation failed", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    return JSONResponse(content=out.model_dump(mode="json", by_alias=True))
