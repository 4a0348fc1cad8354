# rng/beacon.py
from typing import Sequence
from chain.header import BlockHeader
from errors import IndexOutOfRange
from rng.hashing import sha256_hex


def draw_block_index(draw_block_height: int, current_block_height: int) -> int:
    return draw_block_height - current_block_height - 1


def iterate_hash(value: str, hash_rounds: int) -> str:
    """
    hash_rounds + 1 итераций SHA-256 над строкой (цикл 0..hash_rounds включительно,
    совместимо с исходными розыгрышами). Промежуточные значения в upper-case hex.
    """
    final_hash = value
    for _ in range(hash_rounds + 1):
        final_hash = sha256_hex(final_hash, upper=True)
    return final_hash


def deriving_block(headers: Sequence[BlockHeader], draw_block_height: int, current_block_height: int) -> BlockHeader:
    idx = draw_block_index(draw_block_height, current_block_height)
    if not 0 <= idx < len(headers):
        raise IndexOutOfRange(f"draw block index {idx} outside [0, {len(headers)})",
                              index=idx, size=len(headers))
    return headers[idx]


def derive_beacon(headers: Sequence[BlockHeader], draw_block_height: int,
                  current_block_height: int, hash_rounds: int) -> str:
    """Маяк: хеш блока розыгрыша, пропущенный через iterate_hash."""
    if hash_rounds < 0:
        raise ValueError("hash_rounds must be >= 0")
    block = deriving_block(headers, draw_block_height, current_block_height)
    return iterate_hash(block.hash, hash_rounds)
