# rng/score.py
from dataclasses import dataclass
from typing import Iterable, List
from rng.hashing import sha256_hex
from services.state import Participant


@dataclass(frozen=True)
class ScoredParticipant:
    participant: Participant
    score: int


def score_of(participant: Participant, beacon: str) -> int:
    """int(sha256(str(ticket_id) + beacon), 16); тот же SHA-256, что и у маяка, один раунд."""
    digest = sha256_hex(str(participant.ticket_id) + beacon, upper=True)
    return abs(int(digest, 16))


def score_all(participants: Iterable[Participant], beacon: str) -> List[ScoredParticipant]:
    return [ScoredParticipant(p, score_of(p, beacon)) for p in participants]


def rank(scored: Iterable[ScoredParticipant]) -> List[ScoredParticipant]:
    """По возрастанию очков; sorted стабилен, при равенстве сохраняется порядок участников."""
    return sorted(scored, key=lambda s: s.score)
