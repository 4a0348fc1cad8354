# services/resolve.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple
from chain.header import decode_all
from chain.link import validate_chain
from errors import DrawError, EmptyParticipantSet, NotWinner, WrongBlockCount
from rng.beacon import derive_beacon
from rng.score import ScoredParticipant, rank, score_all
from services.state import DrawState, Participant

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Winner:
    participant: Participant
    score: int
    beacon: str
    draw_block_hash: str


@dataclass(frozen=True)
class Verdict:
    winner: Optional[Winner] = None
    error: Optional[DrawError] = None
    ranking: Tuple[ScoredParticipant, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.error is None and self.winner is not None


def determine_winner(state: DrawState, candidate_blocks: Sequence[bytes]) -> Tuple[Winner, Tuple[ScoredParticipant, ...]]:
    """
    Полная проверка кандидатной цепочки и выбор победителя.
    Бросает DrawError; состояние не трогает.
    """
    expected = state.blocks_expected
    if len(candidate_blocks) != expected:
        raise WrongBlockCount(f"expected {expected} blocks, got {len(candidate_blocks)}",
                              expected=expected, got=len(candidate_blocks))

    headers = decode_all(list(candidate_blocks))
    validate_chain(state.current_block.hash, state.current_block.difficulty_target, headers)

    beacon = derive_beacon(headers, state.draw_block_height, state.current_block.height, state.hash_rounds)
    ranking = tuple(rank(score_all(state.participants, beacon)))
    if not ranking:
        raise EmptyParticipantSet("draw has no participants")
    top = ranking[-1]
    winner = Winner(
        participant=top.participant,
        score=top.score,
        beacon=beacon,
        draw_block_hash=headers[state.draw_block_index].hash,
    )
    return winner, ranking


def resolve(state: DrawState, candidate_blocks: Sequence[bytes], claimant: str) -> Verdict:
    """
    Вердикт для попытки claimant забрать приз. Ошибки возвращаются в Verdict.error,
    наружу не пробрасываются. Повтор с теми же данными даёт тот же вердикт.
    """
    try:
        winner, ranking = determine_winner(state, candidate_blocks)
    except DrawError as e:
        log.info("draw rejected for %s: %s (%s)", claimant, e.code, e.message)
        return Verdict(error=e)

    if claimant != winner.participant.identity:
        log.info("claimant %s is not the winner (ticket %s)", claimant, winner.participant.ticket_id)
        return Verdict(winner=winner, ranking=ranking,
                       error=NotWinner("only the winner can claim the draw", claimant=claimant))

    log.info("draw won by %s with ticket %s", claimant, winner.participant.ticket_id)
    return Verdict(winner=winner, ranking=ranking)
