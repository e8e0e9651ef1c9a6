"""Lossy single-slot hand-off between the simulation and the renderer."""

from __future__ import annotations

import threading
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class SnapshotChannel(Generic[T]):
    """Holds at most one undelivered value.

    The producer never waits: :meth:`send` replaces whatever the consumer has
    not picked up yet and counts it as dropped. Only the consumer side may
    block, in :meth:`receive`.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ready = threading.Condition(self._lock)
        self._value: Optional[T] = None
        self._pending = False
        self._closed = False
        self.sent = 0
        self.dropped = 0

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def send(self, value: T) -> None:
        with self._lock:
            if self._closed:
                raise RuntimeError("Cannot send on a closed snapshot channel")
            if self._pending:
                self.dropped += 1
            self._value = value
            self._pending = True
            self.sent += 1
            self._ready.notify_all()

    def try_receive(self) -> Optional[T]:
        with self._lock:
            return self._take_locked()

    def receive(self, timeout: Optional[float] = None) -> Optional[T]:
        """Wait up to ``timeout`` seconds for a value.

        Returns ``None`` on timeout or once the channel is closed and drained.
        """

        with self._ready:
            self._ready.wait_for(lambda: self._pending or self._closed, timeout=timeout)
            return self._take_locked()

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._ready.notify_all()

    def _take_locked(self) -> Optional[T]:
        if not self._pending:
            return None
        value = self._value
        self._value = None
        self._pending = False
        return value
