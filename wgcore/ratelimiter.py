"""Per-address token-bucket rate limiting for handshake packets."""

from __future__ import annotations

import ipaddress
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Union

PACKETS_PER_SECOND = 20
PACKETS_BURSTABLE = 5
GARBAGE_COLLECT_TIME_NS = 1_000_000_000
PACKET_COST = 1_000_000_000 // PACKETS_PER_SECOND
MAX_TOKENS = PACKET_COST * PACKETS_BURSTABLE

_COLLECT_INTERVAL = 1.0

Address = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


@dataclass
class _Entry:
    last_time: int
    tokens: int


class Ratelimiter:
    """Token bucket per source address, with background garbage collection.

    ``time_now`` returns the current time in nanoseconds.
    """

    def __init__(self, time_now: Optional[Callable[[], int]] = None) -> None:
        self.time_now = time_now or time.monotonic_ns
        self._lock = threading.Lock()
        self._table: Optional[dict[Address, _Entry]] = None
        self._stop: Optional[threading.Event] = None
        self._wake: Optional[threading.Event] = None

    def __enter__(self) -> "Ratelimiter":
        self.init()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def init(self) -> None:
        """Reset the table and (re)start the garbage collector."""
        with self._lock:
            if self._stop is not None and self._wake is not None:
                self._stop.set()
                self._wake.set()
            stop = threading.Event()
            wake = threading.Event()
            self._stop, self._wake = stop, wake
            self._table = {}
        threading.Thread(
            target=self._collect, args=(stop, wake), daemon=True, name="ratelimiter-gc"
        ).start()

    def close(self) -> None:
        """Stop the garbage collector."""
        with self._lock:
            if self._stop is not None and self._wake is not None:
                self._stop.set()
                self._wake.set()

    def _collect(self, stop: threading.Event, wake: threading.Event) -> None:
        while not stop.is_set():
            wake.wait()
            wake.clear()
            while not stop.wait(_COLLECT_INTERVAL):
                if self.cleanup():
                    break

    def cleanup(self) -> bool:
        """Drop stale entries; return True when the table is empty."""
        with self._lock:
            if self._table is None:
                return True
            now = self.time_now()
            stale = [
                key
                for key, entry in self._table.items()
                if now - entry.last_time > GARBAGE_COLLECT_TIME_NS
            ]
            for key in stale:
                del self._table[key]
            return not self._table

    def allow(self, ip: Union[str, Address]) -> bool:
        """Return whether a packet from ``ip`` may be processed now."""
        addr = ip if isinstance(ip, (ipaddress.IPv4Address, ipaddress.IPv6Address)) else ipaddress.ip_address(ip)
        with self._lock:
            if self._table is None:
                raise RuntimeError("ratelimiter not initialized")
            now = self.time_now()
            entry = self._table.get(addr)
            if entry is None:
                self._table[addr] = _Entry(last_time=now, tokens=MAX_TOKENS - PACKET_COST)
                if len(self._table) == 1 and self._wake is not None:
                    self._wake.set()
                return True

            entry.tokens = min(entry.tokens + (now - entry.last_time), MAX_TOKENS)
            entry.last_time = now
            if entry.tokens > PACKET_COST:
                entry.tokens -= PACKET_COST
                return True
            return False