# chain/link.py
import logging
from typing import Iterable
from chain.header import BlockHeader
from chain.pow import is_valid
from errors import BrokenChainLink, DifficultyMismatch, InvalidBlockchain, InvalidProofOfWork

log = logging.getLogger(__name__)


def validate_chain(starting_hash: str, difficulty_target: int, headers: Iterable[BlockHeader]) -> None:
    """
    Проверяет, что headers продолжают блок starting_hash:
    PoW каждого заголовка, nBits == difficulty_target (ретаргет не учитываем),
    prev_hash указывает на предыдущий. Первая же ошибка: InvalidBlockchain.
    """
    previous_hash = starting_hash
    for i, header in enumerate(headers):
        if not is_valid(header):
            log.warning("block %s is not valid (proof of work)", header.hash)
            raise InvalidProofOfWork(f"block {header.hash} does not satisfy its target",
                                     index=i, hash=header.hash)

        if header.bits != difficulty_target:
            log.warning("difficulty is not the expected one: %#x != %#x", header.bits, difficulty_target)
            raise DifficultyMismatch(f"block {header.hash} bits {header.bits:#x} != {difficulty_target:#x}",
                                     index=i, hash=header.hash)

        if header.prev_hash != previous_hash:
            log.warning("block %s doesn't point to previous block %s", header.hash, previous_hash)
            raise BrokenChainLink(f"block {header.hash} doesn't point to {previous_hash}",
                                  index=i, hash=header.hash)

        log.debug("block %s points to %s", header.hash, previous_hash)
        previous_hash = header.hash


def is_chain_valid(starting_hash: str, difficulty_target: int, headers: Iterable[BlockHeader]) -> bool:
    try:
        validate_chain(starting_hash, difficulty_target, headers)
    except InvalidBlockchain:
        return False
    return True
