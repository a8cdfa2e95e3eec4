from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Issued:
    """Outcome of one token request made during the smoke run."""

    service_id: str
    method: str
    status_code: int
    elapsed_ms: float
    token: str | None = None
    error: str | None = None


class SmokeError(RuntimeError):
    """Raised when the smoke flow cannot proceed (e.g., health never ready)."""


class RequestTokenError(SmokeError):
    """Raised when a token request fails at the transport level after retries."""
