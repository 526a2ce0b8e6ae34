"""Transport packet sizing: padding of plaintext before encryption."""

from __future__ import annotations

PADDING_MULTIPLE = 16


def _round_up(size: int) -> int:
    return (size + PADDING_MULTIPLE - 1) & ~(PADDING_MULTIPLE - 1)


def calculate_padding_size(packet_size: int, mtu: int) -> int:
    """Number of zero bytes to append to a packet of ``packet_size`` bytes.

    The content is padded to a multiple of ``PADDING_MULTIPLE``. With a
    non-zero ``mtu`` the padding is computed on the last MTU-sized unit of
    the packet and never grows that unit beyond ``mtu``. An ``mtu`` of zero
    means no limit.
    """
    last_unit = packet_size
    if mtu == 0:
        return _round_up(last_unit) - last_unit
    if last_unit > mtu:
        last_unit %= mtu
    padded_size = min(_round_up(last_unit), mtu)
    return padded_size - last_unit