# wgcore

Building blocks of a userspace WireGuard-style tunnel daemon, with no
dependencies outside the standard library.

## Modules

- `wgcore.ratelimiter`: `Ratelimiter`, a token bucket for each source
  address. It is meant for handshake messages. Each address gets a burst of 5
  packets, then 20 per second.
  - Call `init()` before `allow(ip)`. Calling `allow` first raises
    `RuntimeError`. `allow` takes a string or an `ipaddress` object.
  - A background thread drops entries that have been idle for more than one
    second. `cleanup()` does the same thing on demand and returns `True` when
    the table is empty.
  - `close()` stops the background thread. The class also works as a context
    manager, which calls `init()` on entry and `close()` on exit.
  - Time comes from `time_now`, a callable that returns nanoseconds. It
    defaults to `time.monotonic_ns`.
- `wgcore.pools`: `WaitPool(max, new)`, an object pool.
  - When `max` is non-zero, `get()` blocks while `max` objects are checked
    out, and `put()` releases one.
  - A `max` of zero means no limit.
  - `count()` gives the number of objects checked out. It is only tracked
    when a limit is set.
  - The module also holds the default queue-size constants.
- `wgcore.timers`: `Timer(expiration)`, a one-shot timer that can be
  re-armed.
  - `mod(delay)` arms it for `delay` seconds from now.
  - `delete()` cancels it.
  - `delete_sync()` cancels it and waits for an expiration callback that is
    already running.
  - `is_pending()` reports whether it is armed.
  - `jitter_delay(base, max_jitter_ms)` adds a random jitter of under
    `max_jitter_ms` milliseconds to `base` seconds.
- `wgcore.keys`: key-size constants and key helpers.
  - `to_b64` encodes a key as base64.
  - `from_b64(src, size)` decodes to exactly `size` bytes. It zero-pads
    short input, truncates long input, and raises `ValueError` on malformed
    base64.
  - `keys_equal` and `is_zero` compare in constant time.
  - `abbreviate_key` returns a short `abcd…wxyz` form for log lines. It uses
    the first and last four base64 characters of the key's first 32 bytes.
- `wgcore.uapi`: the Unix control socket at `<directory>/<iface>.sock`.
  - `socket_path(iface, directory)` builds that path.
  - `uapi_open(name, directory)` creates the listening socket. It creates the
    directory if needed and uses umask `077`. It removes a stale socket file
    left by a dead process. If another process is still listening, it raises
    `OSError` with `EADDRINUSE`.
  - `uapi_listen(name, sock, directory)` wraps the socket in a
    `UAPIListener`.
  - `UAPIListener.accept()` returns connections until the socket file is
    removed or the listener is closed. After that it raises the error that
    ended listening.
  - `close()` removes the socket file. `addr()` returns its path.
- `wgcore.packet`: `calculate_padding_size(packet_size, mtu)`. It returns the
  number of zero bytes that bring a payload to a multiple of 16. The padded
  last MTU-sized unit never exceeds `mtu`. An `mtu` of 0 means no cap.

## What it does not do

The package does not do the following:

- It has no daemon or command-line program.
- It does not create tunnel devices.
- It does not perform handshakes or encrypt packets.
- It does not manage peers.
- It does not parse configuration sent over the control socket. `wgcore.uapi`
  hands you connected sockets, and reading the protocol on them is left to
  the caller.

## Installation

```
pip install .
```

## Examples

```python
from wgcore.ratelimiter import Ratelimiter

with Ratelimiter() as limiter:
    if limiter.allow("192.0.2.1"):
        ...
```

```python
from wgcore.packet import calculate_padding_size

calculate_padding_size(17, 1420)   # 15
```

```python
from wgcore.keys import to_b64, from_b64

encoded = to_b64(bytes(32))
assert from_b64(encoded, 32) == bytes(32)
```

## Tests

```
pip install .[test]
pytest
```