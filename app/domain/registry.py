from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

__all__ = [
    "ReadWriteLock",
    "ServiceRegistry",
]


class ReadWriteLock:
    """Shared/exclusive lock built on a single condition variable.

    - Any number of readers may hold the lock together.
    - A writer holds it alone.
    - Once a writer is waiting, new readers queue behind it.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            except BaseException:
                # Readers parked behind this writer must re-check the state.
                self._writers_waiting -= 1
                self._cond.notify_all()
                raise
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class ServiceRegistry:
    """Set of (service_id, method) pairs that may receive payment tokens.

    Membership only grows: there is no removal. A service that was never
    registered behaves like a service with no methods.
    """

    def __init__(self) -> None:
        self._services: dict[str, set[str]] = {}
        self._lock = ReadWriteLock()

    def register_service(self, service_id: str, method: str) -> None:
        """Register `method` under `service_id`. Registering twice is a no-op."""
        with self._lock.write():
            self._services.setdefault(service_id, set()).add(method)

    def register_many(self, pairs: Iterable[tuple[str, str]]) -> None:
        for service_id, method in pairs:
            self.register_service(service_id, method)

    def is_service_available(self, service_id: str, method: str) -> bool:
        """Return True iff the pair was registered."""
        with self._lock.read():
            methods = self._services.get(service_id)
            return methods is not None and method in methods

    def pairs(self) -> list[tuple[str, str]]:
        """Sorted snapshot of the registered pairs."""
        with self._lock.read():
            return sorted((s, m) for s, methods in self._services.items() for m in methods)

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        return self.is_service_available(*pair)

    def __len__(self) -> int:
        with self._lock.read():
            return sum(len(methods) for methods in self._services.values())
