import pytest

from wgcore.packet import PADDING_MULTIPLE, calculate_padding_size


def test_empty_packet_needs_no_padding():
    assert calculate_padding_size(0, 0) == 0
    assert calculate_padding_size(0, 1420) == 0


@pytest.mark.parametrize("size", range(0, 200))
def test_unlimited_mtu_pads_to_multiple(size):
    pad = calculate_padding_size(size, 0)
    assert 0 <= pad < PADDING_MULTIPLE
    assert (size + pad) % PADDING_MULTIPLE == 0


@pytest.mark.parametrize("size", [16, 32, 48, 1024, 1408])
def test_aligned_sizes_unpadded(size):
    assert calculate_padding_size(size, 0) == 0
    assert calculate_padding_size(size, 1420) == 0


def test_single_byte_padded_to_full_block():
    assert calculate_padding_size(1, 0) == 15


def test_packet_at_mtu_is_not_padded_beyond_mtu():
    assert calculate_padding_size(1420, 1420) == 0


def test_packet_over_mtu_pads_last_unit():
    assert calculate_padding_size(1421, 1420) == calculate_padding_size(1, 1420)
    assert calculate_padding_size(1421, 1420) == calculate_padding_size(1, 0)


@pytest.mark.parametrize("mtu", [1280, 1420, 1500, 1419, 100])
@pytest.mark.parametrize("size", [0, 1, 15, 17, 99, 100, 1279, 1281, 1419, 1420, 1421, 3000])
def test_padding_never_exceeds_mtu(size, mtu):
    pad = calculate_padding_size(size, mtu)
    last_unit = size % mtu if size > mtu else size
    assert pad >= 0
    assert last_unit + pad <= mtu
    assert pad < PADDING_MULTIPLE


@pytest.mark.parametrize("size", [1, 5, 100, 1000, 1400])
def test_within_mtu_matches_unlimited_when_room(size):
    mtu = 1500
    assert calculate_padding_size(size, mtu) == calculate_padding_size(size, 0)


def test_unaligned_mtu_caps_padding():
    mtu = 1419
    size = 1410
    pad = calculate_padding_size(size, mtu)
    assert size + pad == mtu
    assert calculate_padding_size(size, 0) > pad