# chain/pow.py
from chain.header import BlockHeader

_SIGN_BIT = 0x00800000
_MANTISSA = 0x007FFFFF


def bits_to_target(bits: int) -> int:
    """
    Compact-форма nBits -> 256-битный порог:
    target = mantissa * 256^(exponent-3).
    Отрицательные значения (выставлен знаковый бит) дают 0.
    """
    exponent = (bits >> 24) & 0xFF
    mantissa = bits & _MANTISSA
    if bits & _SIGN_BIT and mantissa:
        return 0
    if exponent <= 3:
        return mantissa >> (8 * (3 - exponent))
    return mantissa << (8 * (exponent - 3))


def is_valid(header: BlockHeader) -> bool:
    """hash <= target; нулевой порог не проходит никогда."""
    target = bits_to_target(header.bits)
    if target <= 0:
        return False
    return header.hash_int <= target
