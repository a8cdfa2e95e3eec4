from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable

import httpx

from app.logging_conf import get_logger
from runner.types import Issued, RequestTokenError, SmokeError

logger = get_logger("runner.client")


async def wait_for_health(base_url: str, timeout_s: float = 20.0) -> None:
    """Ping /health until it returns ok or raise after `timeout_s` seconds."""
    deadline = time.monotonic() + timeout_s
    async with httpx.AsyncClient(base_url=base_url, timeout=5.0) as client:
        while time.monotonic() < deadline:
            try:
                r = await client.get("/health")
                if r.status_code == 200 and r.json().get("ok") is True:
                    logger.info("health.ok", extra={"event": "health_ok"})
                    return
            except httpx.HTTPError:
                pass
            await asyncio.sleep(0.25)
    raise SmokeError("Health check did not pass within timeout")


async def request_token(
    client: httpx.AsyncClient,
    service_id: str,
    method: str,
    *,
    period_from: str,
    period_to: str,
    retries: int = 2,
) -> Issued:
    """POST one payment request and record the outcome.

    - HTTP error statuses are outcomes, not failures: they are returned
    - Only transport errors are retried
    """
    body = {"service_id": service_id, "method": method, "from": period_from, "to": period_to}
    last_err: Exception | None = None
    for attempt in range(retries):
        start = time.perf_counter()
        try:
            r = await client.post("/payment", json=body)
        except httpx.TransportError as e:  # pragma: no cover - network flakiness
            last_err = e
            logger.warning(
                "payment.retry",
                extra={
                    "event": "payment_retry",
                    "service_id": service_id,
                    "method": method,
                    "attempt": attempt + 1,
                    "error": str(e),
                },
            )
            continue
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        if r.status_code == 200:
            return Issued(
                service_id=service_id,
                method=method,
                status_code=r.status_code,
                elapsed_ms=elapsed_ms,
                token=r.json().get("token"),
            )
        return Issued(
            service_id=service_id,
            method=method,
            status_code=r.status_code,
            elapsed_ms=elapsed_ms,
            error=r.text,
        )
    raise RequestTokenError(f"payment request failed for {service_id}/{method}: {last_err}")


async def request_all(
    base_url: str,
    pairs: Iterable[tuple[str, str]],
    *,
    period_from: str,
    period_to: str,
) -> list[Issued]:
    """Request tokens for all pairs concurrently; transport failures are dropped."""
    pairs = list(pairs)
    async with httpx.AsyncClient(base_url=base_url, timeout=10.0) as client:
        tasks = [
            request_token(client, s, m, period_from=period_from, period_to=period_to)
            for s, m in pairs
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)
    issued: list[Issued] = []
    for res in results:
        if isinstance(res, Exception):
            continue
        issued.append(res)
    logger.info(
        "payment.summary",
        extra={
            "event": "payment_summary",
            "requested": len(pairs),
            "answered": len(issued),
            "failed": len(results) - len(issued),
        },
    )
    return issued
