# chain/header.py
import struct
from dataclasses import dataclass, field
from errors import MalformedHeader
from rng.hashing import sha256d

HEADER_SIZE = 80

# version | prev_hash | merkle_root | time | bits | nonce, всё little-endian
_LAYOUT = struct.Struct("<I32s32sIII")


def _display_hex(raw32: bytes) -> str:
    """Хеши в сети показывают в обратном порядке байтов."""
    return raw32[::-1].hex()


@dataclass(frozen=True)
class BlockHeader:
    version: int
    prev_hash: str
    merkle_root: str
    timestamp: int
    bits: int
    nonce: int
    hash: str
    raw: bytes = field(repr=False, compare=False)

    @property
    def hash_int(self) -> int:
        return int(self.hash, 16)


def decode(raw: bytes) -> BlockHeader:
    """
    Разбор стандартного 80-байтового заголовка блока.
    hash = sha256d(raw), отображённый reversed-hex (как у block explorer'ов).
    """
    if not isinstance(raw, (bytes, bytearray, memoryview)):
        raise MalformedHeader(f"header must be bytes, got {type(raw).__name__}")
    raw = bytes(raw)
    if len(raw) != HEADER_SIZE:
        raise MalformedHeader(f"header must be {HEADER_SIZE} bytes, got {len(raw)}", size=len(raw))

    version, prev, merkle, timestamp, bits, nonce = _LAYOUT.unpack(raw)
    return BlockHeader(
        version=version,
        prev_hash=_display_hex(prev),
        merkle_root=_display_hex(merkle),
        timestamp=timestamp,
        bits=bits,
        nonce=nonce,
        hash=_display_hex(sha256d(raw)),
        raw=raw,
    )


def encode(version: int, prev_hash: str, merkle_root: str, timestamp: int, bits: int, nonce: int) -> bytes:
    """Обратная операция: поля заголовка -> 80 байт (хеши принимаются в display-форме)."""
    try:
        prev = bytes.fromhex(prev_hash)[::-1]
        merkle = bytes.fromhex(merkle_root)[::-1]
    except ValueError as e:
        raise MalformedHeader(f"hash fields must be hex: {e}")
    if len(prev) != 32 or len(merkle) != 32:
        raise MalformedHeader("hash fields must be 32 bytes")
    try:
        return _LAYOUT.pack(version, prev, merkle, timestamp, bits, nonce)
    except struct.error as e:
        raise MalformedHeader(f"header field out of range: {e}")


def decode_all(blocks: list[bytes]) -> list[BlockHeader]:
    out = []
    for i, raw in enumerate(blocks):
        try:
            out.append(decode(raw))
        except MalformedHeader as e:
            raise MalformedHeader(f"block #{i}: {e.message}", index=i, **e.details)
    return out
