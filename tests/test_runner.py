"""Smoke runner logic against an in-process app."""

from __future__ import annotations

import asyncio

import httpx

from app.domain.registry import ServiceRegistry
from app.domain.tokens import generate_token
from app.main import create_app
from runner.client import request_token
from runner.types import Issued
from runner.utils import PROBE_PAIR, percentile, summarize


def test_percentile_interpolates() -> None:
    assert percentile([], 0.95) == 0.0
    assert percentile([5.0], 0.95) == 5.0
    assert percentile([0.0, 10.0], 0.5) == 5.0


def test_summary_passes_when_all_tokens_issued_and_probe_rejected() -> None:
    issued = [
        Issued("svc", "pay", 200, 1.0, token=generate_token()),
        Issued(*PROBE_PAIR, 404, 2.0, error="service or method not found"),
    ]

    summary, code = summarize([("svc", "pay")], issued)

    assert code == 0
    assert summary["tokens_issued"] == 1
    assert summary["probe_rejected"] is True
    assert summary["failures"] == []


def test_summary_fails_on_missing_token_or_accepted_probe() -> None:
    issued = [
        Issued("svc", "pay", 404, 1.0, error="service or method not found"),
        Issued("svc", "refund", 200, 1.0, token="bogus"),
        Issued(*PROBE_PAIR, 200, 1.0, token=generate_token()),
    ]

    summary, code = summarize([("svc", "pay"), ("svc", "refund"), ("svc", "void")], issued)

    assert code == 1
    assert summary["tokens_issued"] == 0
    assert summary["probe_rejected"] is False
    assert {(f["service_id"], f["method"]) for f in summary["failures"]} == {
        ("svc", "pay"),
        ("svc", "refund"),
        ("svc", "void"),
        PROBE_PAIR,
    }


def test_request_token_against_app() -> None:
    reg = ServiceRegistry()
    reg.register_service("svc", "pay")
    app = create_app(registry=reg)

    async def run() -> tuple[Issued, Issued]:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            kwargs = {"period_from": "2024-01-01T00:00:00Z", "period_to": "2024-01-31T00:00:00Z"}
            ok = await request_token(client, "svc", "pay", **kwargs)
            probe = await request_token(client, *PROBE_PAIR, **kwargs)
            return ok, probe

    ok, probe = asyncio.run(run())

    assert ok.status_code == 200 and ok.token
    assert probe.status_code == 404 and probe.token is None
    _, code = summarize([("svc", "pay")], [ok, probe])
    assert code == 0
