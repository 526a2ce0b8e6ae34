"""Cancellable one-shot timers for protocol events."""

from __future__ import annotations

import random
import threading
from typing import Callable, Optional


def jitter_delay(base: float, max_jitter_ms: int) -> float:
    """Return ``base`` seconds plus a random jitter below ``max_jitter_ms`` milliseconds."""
    if max_jitter_ms <= 0:
        raise ValueError("max_jitter_ms must be positive")
    return base + random.randrange(max_jitter_ms) / 1000.0


class Timer:
    """A timer that can be re-armed, cancelled, and cancelled synchronously.

    ``expiration`` runs on a background thread when the timer fires while pending.
    """

    def __init__(self, expiration: Callable[[], None]) -> None:
        self._expiration = expiration
        self._modifying_lock = threading.Lock()
        self._running_lock = threading.Lock()
        self._pending = False
        self._generation = 0
        self._timer: Optional[threading.Timer] = None

    def _fire(self, generation: int) -> None:
        with self._running_lock:
            with self._modifying_lock:
                if not self._pending or generation != self._generation:
                    return
                self._pending = False
            self._expiration()

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def mod(self, delay: float) -> None:
        """Arm the timer to fire ``delay`` seconds from now."""
        with self._modifying_lock:
            self._cancel_locked()
            self._pending = True
            self._generation += 1
            timer = threading.Timer(delay, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def delete(self) -> None:
        """Cancel the timer if it has not fired."""
        with self._modifying_lock:
            self._pending = False
            self._cancel_locked()

    def delete_sync(self) -> None:
        """Cancel the timer and wait for a running expiration to finish."""
        self.delete()
        with self._running_lock:
            self.delete()

    def is_pending(self) -> bool:
        """Whether the timer is armed and has not yet fired."""
        with self._modifying_lock:
            return self._pending