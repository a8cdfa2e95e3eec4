#!/usr/bin/env python3
"""Smoke runner exercising a live payment token service.

Steps:
- wait for server health
- request a token for every expected pair concurrently
- request one deliberately unregistered pair
- emit a compact summary and exit code
"""
from __future__ import annotations

import asyncio
import sys

from app.logging_conf import get_logger, setup_logging
from runner.cli import parse_args
from runner.client import request_all, wait_for_health
from runner.utils import PROBE_PAIR, summarize

logger = get_logger("runner")


async def run_smoke(
    *,
    base_url: str,
    pairs: list[tuple[str, str]],
    period_from: str,
    period_to: str,
    timeout_s: float = 20.0,
) -> int:
    await wait_for_health(base_url, timeout_s=timeout_s)
    issued = await request_all(
        base_url, [*pairs, PROBE_PAIR], period_from=period_from, period_to=period_to
    )
    summary, exit_code = summarize(pairs, issued)
    logger.info("runner.summary", extra=summary)
    return exit_code


def main(argv: list[str] | None = None) -> None:
    setup_logging()
    args = parse_args(sys.argv[1:] if argv is None else argv)
    code = asyncio.run(
        run_smoke(
            base_url=args.base_url,
            pairs=list(args.pairs),
            period_from=args.period_from,
            period_to=args.period_to,
            timeout_s=args.timeout,
        )
    )
    raise SystemExit(code)


if __name__ == "__main__":
    main()
