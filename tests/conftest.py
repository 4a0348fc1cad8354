"""
Draw verifier test fixtures
"""

import hashlib
import pytest

from chain.header import decode, encode
from chain.pow import bits_to_target
from services.state import CurrentBlock, DrawState, Participant
from settings import settings

# regtest-порог: примерно каждый второй nonce подходит
EASY_BITS = 0x207FFFFF
START_HASH = "0f" * 32
START_HEIGHT = 100

GENESIS_HASH = "000000000019d6689c085ae165831e934ff763ae46a2a6c172b3f1b60a8ce26f"
GENESIS_HEADER = bytes.fromhex(
    "01000000"
    + "00" * 32
    + "3ba3edfd7a7b12b27ac72c3e67768f617fc81bc3888a51323a9fb8aa4b1e5e4a"
    + "29ab5f49"
    + "ffff001d"
    + "1dac2b7c"
)
BLOCK1_HASH = "00000000839a8e6886ab5951d76f411475428afc90947ee320161bbf18eb6048"
BLOCK1_HEADER = bytes.fromhex(
    "010000006fe28c0ab6f1b372c1a6a246ae63f74f931e8365e15a089c68d6190000000000"
    "982051fd1e4ba744bbbe680e1fee14677ba1a3c3540bf7b1cdb606e857233e0e"
    "61bc6649ffff001d01e36299"
)


def mine(prev_hash: str, bits: int = EASY_BITS, timestamp: int = 1_600_000_000,
         merkle_root: str = "ab" * 32, valid: bool = True) -> bytes:
    """Ищет nonce, при котором заголовок проходит (или, с valid=False, не проходит) PoW."""
    target = bits_to_target(bits)
    nonce = 0
    while True:
        raw = encode(1, prev_hash, merkle_root, timestamp, bits, nonce)
        if (decode(raw).hash_int <= target) == valid:
            return raw
        nonce += 1


def mine_chain(start_hash: str, count: int, bits: int = EASY_BITS) -> list:
    blocks = []
    prev = start_hash
    for i in range(count):
        raw = mine(prev, bits, timestamp=1_600_000_000 + 600 * i)
        blocks.append(raw)
        prev = decode(raw).hash
    return blocks


def expected_beacon(block_hash: str, hash_rounds: int) -> str:
    h = block_hash
    for _ in range(hash_rounds + 1):
        h = hashlib.sha256(h.encode()).hexdigest().upper()
    return h


def expected_score(ticket_id: int, beacon: str) -> int:
    return int(hashlib.sha256((str(ticket_id) + beacon).encode()).hexdigest(), 16)


def make_state(participants=None, draw_block_height: int = START_HEIGHT + 4,
               blocks_for_verification: int = 5, hash_rounds: int = 0,
               current_height: int = START_HEIGHT, participation_fee: int = 10) -> DrawState:
    if participants is None:
        participants = (Participant("alice", 0), Participant("bob", 1), Participant("carol", 2))
    return DrawState(
        current_block=CurrentBlock(START_HASH, current_height, EASY_BITS),
        draw_block_height=draw_block_height,
        blocks_for_verification=blocks_for_verification,
        hash_rounds=hash_rounds,
        participants=tuple(participants),
        participation_fee=participation_fee,
    )


@pytest.fixture
def state() -> DrawState:
    return make_state()


@pytest.fixture(scope="session")
def chain_blocks() -> list:
    """Цепочка ровно под state(): 104 + 5 - 100 = 9 блоков."""
    return mine_chain(START_HASH, 9)


@pytest.fixture
def store_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "STORE_DIR", str(tmp_path / "draws"))
    return tmp_path / "draws"
