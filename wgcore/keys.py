"""Key sizes, base64 helpers and constant-time key comparison."""

from __future__ import annotations

import base64
import binascii
import hmac

NOISE_PUBLIC_KEY_SIZE = 261120
NOISE_PRIVATE_KEY_SIZE = 6492
NOISE_PRESHARED_KEY_SIZE = 32
NOISE_EPHEMERAL_PUBLIC_KEY_SIZE = 800
NOISE_EPHEMERAL_PRIVATE_KEY_SIZE = 1632
STATIC_KEM_NAME = "Classic-McEliece-348864f"

_ABBREVIATED_SPAN = 32


def to_b64(key: bytes) -> str:
    """Encode ``key`` as standard padded base64."""
    return base64.b64encode(bytes(key)).decode("ascii")


def from_b64(src: str, size: int) -> bytes:
    """Decode ``src`` into a buffer of exactly ``size`` bytes.

    Shorter input is zero-padded, longer input is truncated. Malformed
    base64 raises ``ValueError``.
    """
    try:
        decoded = base64.b64decode(src, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64 key: {exc}") from exc
    return decoded[:size].ljust(size, b"\x00")


def keys_equal(a: bytes, b: bytes) -> bool:
    """Compare two keys in constant time; keys of different length differ."""
    return hmac.compare_digest(bytes(a), bytes(b))


def is_zero(key: bytes) -> bool:
    """Whether every byte of ``key`` is zero, checked in constant time."""
    return keys_equal(key, bytes(len(key)))


def abbreviate_key(key: bytes) -> str:
    """Short form of a key: the first and last four base64 characters of its first 32 bytes."""
    if len(key) < _ABBREVIATED_SPAN:
        raise ValueError(f"key must be at least {_ABBREVIATED_SPAN} bytes")
    encoded = to_b64(key[:_ABBREVIATED_SPAN])
    return f"{encoded[0:4]}…{encoded[39:43]}"