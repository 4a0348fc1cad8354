# rng/hashing.py
import hashlib
from blake3 import blake3

def sha256d(data: bytes) -> bytes:
    """Двойной SHA-256, как в заголовках Bitcoin."""
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()

def sha256_hex(text: str, upper: bool = False) -> str:
    """SHA-256 от UTF-8 строки, результат в hex."""
    h = hashlib.sha256(text.encode("utf-8")).hexdigest()
    return h.upper() if upper else h

def blocks_root_hex(blocks: list[bytes]) -> str:
    """BLAKE3 поверх конкатенации сырых заголовков (для истории)."""
    h = blake3()
    for raw in blocks:
        h.update(raw)
    return h.hexdigest()
