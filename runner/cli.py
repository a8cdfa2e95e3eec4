from __future__ import annotations

import argparse
import os

from app.config import DEFAULT_REGISTERED_SERVICES, parse_service_pairs


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments for the smoke runner."""
    parser = argparse.ArgumentParser(description="Payment token service smoke runner")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL", "http://127.0.0.1:8080"))
    parser.add_argument(
        "--pairs",
        type=parse_service_pairs,
        default=parse_service_pairs(os.getenv("REGISTERED_SERVICES", DEFAULT_REGISTERED_SERVICES)),
        help="Comma-separated service:method pairs expected to be registered",
    )
    parser.add_argument("--from", dest="period_from", default="2024-01-01T00:00:00Z")
    parser.add_argument("--to", dest="period_to", default="2024-01-31T00:00:00Z")
    parser.add_argument("--timeout", type=float, default=20.0)
    return parser.parse_args(argv)
