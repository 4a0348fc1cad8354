"""
Block header codec tests
"""

import pytest

from chain.header import HEADER_SIZE, decode, decode_all, encode
from errors import MalformedHeader
from conftest import BLOCK1_HASH, BLOCK1_HEADER, GENESIS_HASH, GENESIS_HEADER


class TestDecode:
    """Decoding real mainnet headers."""

    def test_genesis_fields(self):
        h = decode(GENESIS_HEADER)
        assert h.version == 1
        assert h.prev_hash == "00" * 32
        assert h.merkle_root == "4a5e1e4baab89f3a32518a88c31bc87f618f76673e2cc77ab2127b7afdeda33b"
        assert h.timestamp == 1231006505
        assert h.bits == 0x1D00FFFF
        assert h.nonce == 2083236893

    def test_genesis_hash_uses_display_order(self):
        assert decode(GENESIS_HEADER).hash == GENESIS_HASH

    def test_block1_points_to_genesis(self):
        h = decode(BLOCK1_HEADER)
        assert h.hash == BLOCK1_HASH
        assert h.prev_hash == GENESIS_HASH
        assert h.nonce == 2573394689

    def test_hash_int(self):
        assert decode(GENESIS_HEADER).hash_int == int(GENESIS_HASH, 16)

    def test_bytearray_accepted(self):
        assert decode(bytearray(GENESIS_HEADER)).hash == GENESIS_HASH


class TestMalformed:

    @pytest.mark.parametrize("size", [0, 79, 81, 285])
    def test_wrong_length(self, size):
        with pytest.raises(MalformedHeader):
            decode(bytes(size))

    def test_not_bytes(self):
        with pytest.raises(MalformedHeader):
            decode(GENESIS_HEADER.hex())

    def test_decode_all_reports_index(self):
        with pytest.raises(MalformedHeader) as exc:
            decode_all([GENESIS_HEADER, b"\x00" * 10])
        assert exc.value.details["index"] == 1

    def test_encode_rejects_bad_hash(self):
        with pytest.raises(MalformedHeader):
            encode(1, "zz" * 32, "00" * 32, 0, 0, 0)

    def test_encode_rejects_overflow(self):
        with pytest.raises(MalformedHeader):
            encode(1, "00" * 32, "00" * 32, 2 ** 32, 0, 0)


def test_encode_reproduces_genesis():
    raw = encode(1, "00" * 32, "4a5e1e4baab89f3a32518a88c31bc87f618f76673e2cc77ab2127b7afdeda33b",
                 1231006505, 0x1D00FFFF, 2083236893)
    assert len(raw) == HEADER_SIZE
    assert raw == GENESIS_HEADER
