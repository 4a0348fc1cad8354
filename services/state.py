# services/state.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class CurrentBlock:
    # уже добытый блок, от которого отсчитывается розыгрыш
    hash: str
    height: int
    difficulty_target: int   # nBits в compact-форме


@dataclass(frozen=True)
class Participant:
    identity: str
    ticket_id: int


@dataclass(frozen=True)
class DrawState:
    """
    Состояние розыгрыша. Неизменяемо: ядро его только читает,
    закрытие розыгрыша делает внешний слой (services.store).

    draw_block_height: абсолютная высота блока, чей хеш станет маяком;
    после него нужно ещё blocks_for_verification блоков, чтобы блок
    розыгрыша не оказался сиротой.
    """
    current_block: CurrentBlock
    draw_block_height: int
    blocks_for_verification: int
    hash_rounds: int
    participants: Tuple[Participant, ...] = field(default_factory=tuple)
    participation_fee: int = 0

    @property
    def blocks_expected(self) -> int:
        return self.draw_block_height + self.blocks_for_verification - self.current_block.height

    @property
    def draw_block_index(self) -> int:
        return self.draw_block_height - self.current_block.height - 1

    @property
    def prize(self) -> int:
        return self.participation_fee * len(self.participants)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentBlock": {
                "hash": self.current_block.hash,
                "height": self.current_block.height,
                "difficultyTarget": self.current_block.difficulty_target,
            },
            "drawBlockHeight": self.draw_block_height,
            "blocksForVerification": self.blocks_for_verification,
            "hashRounds": self.hash_rounds,
            "participants": [{"identity": p.identity, "ticketId": p.ticket_id} for p in self.participants],
            "participationFee": self.participation_fee,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DrawState":
        cb = d["currentBlock"]
        return cls(
            current_block=CurrentBlock(cb["hash"], int(cb["height"]), int(cb["difficultyTarget"])),
            draw_block_height=int(d["drawBlockHeight"]),
            blocks_for_verification=int(d["blocksForVerification"]),
            hash_rounds=int(d["hashRounds"]),
            participants=tuple(Participant(p["identity"], int(p["ticketId"])) for p in d["participants"]),
            participation_fee=int(d.get("participationFee", 0)),
        )
