from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from app.domain.registry import ServiceRegistry
from app.main import create_app


class RecordingRegistry(ServiceRegistry):
    """Registry that remembers every availability lookup."""

    def __init__(self) -> None:
        super().__init__()
        self.lookups: list[tuple[str, str]] = []

    def is_service_available(self, service_id: str, method: str) -> bool:
        self.lookups.append((service_id, method))
        return super().is_service_available(service_id, method)


@pytest.fixture
def registry() -> RecordingRegistry:
    reg = RecordingRegistry()
    reg.register_service("svc", "pay")
    return reg


@pytest.fixture
def client(registry: RecordingRegistry) -> Iterator[TestClient]:
    with TestClient(create_app(registry=registry)) as c:
        yield c


@pytest.fixture
def payment_body() -> dict[str, str]:
    return {
        "service_id": "svc",
        "method": "pay",
        "from": "2024-01-01T00:00:00Z",
        "to": "2024-01-31T00:00:00Z",
    }
