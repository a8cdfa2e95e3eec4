from __future__ import annotations

from app.domain.tokens import TokenError, decode_token
from runner.types import Issued

# A pair no deployment is expected to register; the server must answer 404.
PROBE_PAIR = ("__smoke_probe__", "__unregistered__")


def percentile(values: list[float], p: float) -> float:
    """Compute the p-th percentile using linear interpolation."""
    if not values:
        return 0.0
    s = sorted(values)
    k = (len(s) - 1) * p
    f = int(k)
    c = min(f + 1, len(s) - 1)
    if f == c:
        return s[f]
    return s[f] * (c - k) + s[c] * (k - f)


def _token_ok(token: str | None) -> bool:
    if not token:
        return False
    try:
        decode_token(token)
    except TokenError:
        return False
    return True


def summarize(expected: list[tuple[str, str]], issued: list[Issued]) -> tuple[dict, int]:
    """Compute a summary dict and an exit code from the token request outcomes.

    Exit code is 0 only if every expected pair got a well-formed token and
    the probe pair was rejected with 404.
    """
    by_pair = {(i.service_id, i.method): i for i in issued}
    durations_ms = [i.elapsed_ms for i in issued]
    tokens_ok = 0
    failures: list[dict] = []

    for service_id, method in expected:
        it = by_pair.get((service_id, method))
        if it is None:
            failures.append(
                {"service_id": service_id, "method": method, "error": "no response"}
            )
        elif it.status_code == 200 and _token_ok(it.token):
            tokens_ok += 1
        else:
            failures.append(
                {
                    "service_id": service_id,
                    "method": method,
                    "status_code": it.status_code,
                    "error": it.error or "malformed token",
                }
            )

    probe = by_pair.get(PROBE_PAIR)
    probe_ok = probe is not None and probe.status_code == 404
    if not probe_ok:
        failures.append(
            {
                "service_id": PROBE_PAIR[0],
                "method": PROBE_PAIR[1],
                "status_code": probe.status_code if probe else None,
                "error": "unregistered pair was not rejected with 404",
            }
        )

    summary = {
        "component": "runner",
        "event": "summary",
        "expected": len(expected),
        "tokens_issued": tokens_ok,
        "probe_rejected": probe_ok,
        "timings": {
            "avg_ms": round(sum(durations_ms) / len(durations_ms), 2) if durations_ms else 0.0,
            "p95_ms": round(percentile(durations_ms, 0.95), 2),
            "max_ms": round(max(durations_ms), 2) if durations_ms else 0.0,
        },
        "failures": failures,
    }
    exit_code = 0 if (tokens_ok == len(expected) and probe_ok) else 1
    return summary, exit_code
