"""Bounded object pools and default queue sizing."""

from __future__ import annotations

import threading
from typing import Any, Callable

QUEUE_OUTBOUND_SIZE = 1024
QUEUE_INBOUND_SIZE = 1024
QUEUE_HANDSHAKE_SIZE = 1024
MAX_SEGMENT_SIZE = (1 << 16) - 1  # largest possible UDP datagram
PREALLOCATED_BUFFERS_PER_POOL = 0  # no limit


class WaitPool:
    """Object pool that blocks ``get`` while ``max`` objects are checked out.

    A ``max`` of zero means no limit.
    """

    def __init__(self, max: int, new: Callable[[], Any]) -> None:
        self.max = max
        self._new = new
        self._free: list[Any] = []
        self._count = 0
        self._cond = threading.Condition()

    def get(self) -> Any:
        """Take an object, creating one if none is free."""
        with self._cond:
            if self.max:
                while self._count >= self.max:
                    self._cond.wait()
                self._count += 1
            if self._free:
                return self._free.pop()
        return self._new()

    def put(self, x: Any) -> None:
        """Return an object to the pool."""
        with self._cond:
            self._free.append(x)
            if not self.max:
                return
            self._count -= 1
            self._cond.notify()

    def count(self) -> int:
        """Number of objects currently checked out (tracked only with a limit)."""
        with self._cond:
            return self._count