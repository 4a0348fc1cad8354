# services/setup.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple
from errors import DrawBlockNotInFuture, DuplicateTicket, EmptyParticipantSet, SetupError
from services.state import DrawState, Participant


@dataclass(frozen=True)
class SetupResult:
    error: Optional[SetupError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def check_setup(state: DrawState) -> None:
    if not state.participants:
        raise EmptyParticipantSet("should be at least 1 participant")
    if state.draw_block_height <= state.current_block.height:
        raise DrawBlockNotInFuture(
            f"draw block {state.draw_block_height} should be higher than current {state.current_block.height}",
            drawBlockHeight=state.draw_block_height, currentHeight=state.current_block.height,
        )


def validate_setup(state: DrawState) -> SetupResult:
    try:
        check_setup(state)
    except SetupError as e:
        return SetupResult(error=e)
    return SetupResult()


def assign_tickets(entries: Iterable[Tuple[str, Optional[int]]]) -> Tuple[Participant, ...]:
    """
    Билеты без номера получают свою позицию в списке (организатор первым -> 0).
    Повтор номера даёт DuplicateTicket (ядро уникальность не проверяет).
    """
    out: List[Participant] = []
    seen = set()
    for i, (identity, ticket_id) in enumerate(entries):
        tid = i if ticket_id is None else ticket_id
        if tid in seen:
            raise DuplicateTicket(f"ticket {tid} is used twice", ticketId=tid)
        seen.add(tid)
        out.append(Participant(identity=identity, ticket_id=tid))
    return tuple(out)
