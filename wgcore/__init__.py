"""Building blocks of a userspace WireGuard-style tunnel daemon: rate limiting, pools, timers, keys, padding and the control socket."""

__version__ = "0.1.0"
__all__ = ["keys", "packet", "pools", "ratelimiter", "timers", "uapi"]