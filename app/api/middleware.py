from __future__ import annotations

import time
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ..logging_conf import get_logger

REQUEST_ID_HEADER = "X-Request-ID"

logger = get_logger("api.requests")


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Tag each request with a correlation id and log its start and end.

    An incoming X-Request-ID is reused, otherwise a uuid4 is minted; either
    way it is stored on `request.state` and returned on the response.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        context = {"method": request.method, "path": request.url.path, "request_id": request_id}

        logger.info("request.start", extra={"event": "request_start", **context})
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # FastAPI turns the re-raised error into a 500.
            logger.exception("request.error", extra={"event": "request_error", **context})
            raise

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "request.end",
            extra={
                "event": "request_end",
                "status_code": response.status_code,
                "elapsed_ms": round((time.perf_counter() - started) * 1000.0, 2),
                **context,
            },
        )
        return response
