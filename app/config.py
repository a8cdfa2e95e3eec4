"""Environment-driven settings and the startup registrations they describe."""
from __future__ import annotations

import os
from dataclasses import dataclass

from .domain.registry import ServiceRegistry

__all__ = [
    "DEFAULT_REGISTERED_SERVICES",
    "Settings",
    "parse_service_pairs",
    "load_settings",
    "build_registry",
]

# Pairs registered when REGISTERED_SERVICES is unset.
DEFAULT_REGISTERED_SERVICES = "service1:method1,service1:method2,service2:method1"


@dataclass(frozen=True)
class Settings:
    log_level: str
    app_version: str
    registered_services: tuple[tuple[str, str], ...]


def parse_service_pairs(raw: str) -> tuple[tuple[str, str], ...]:
    """Parse "svc:method,svc:method" into pairs.

    Rules:
    - Items are comma-separated; surrounding whitespace is stripped.
    - Empty items are skipped, so "" yields no pairs.
    - Each item needs exactly one ":" with non-empty text on both sides.

    Raises:
        ValueError: on a malformed item.
    """
    pairs: list[tuple[str, str]] = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        service_id, sep, method = item.partition(":")
        service_id, method = service_id.strip(), method.strip()
        if not sep or ":" in method or not service_id or not method:
            raise ValueError(f"REGISTERED_SERVICES item must look like service:method, got {item!r}")
        pairs.append((service_id, method))
    return tuple(pairs)


def load_settings() -> Settings:
    """Read settings from the environment."""
    from . import __version__

    return Settings(
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        app_version=os.getenv("APP_VERSION", __version__),
        registered_services=parse_service_pairs(
            os.getenv("REGISTERED_SERVICES", DEFAULT_REGISTERED_SERVICES)
        ),
    )


def build_registry(settings: Settings) -> ServiceRegistry:
    registry = ServiceRegistry()
    registry.register_many(settings.registered_services)
    return registry
