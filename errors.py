# errors.py
from typing import Any, Dict


class DrawError(Exception):
    """Базовая ошибка розыгрыша. code стабилен и уходит в API как есть."""
    code = "DRAW_ERROR"

    def __init__(self, message: str = "", **details: Any):
        super().__init__(message or self.code)
        self.message = message or self.code
        self.details: Dict[str, Any] = details

    def to_dict(self) -> Dict[str, Any]:
        out = {"error": self.message, "code": self.code}
        if self.details:
            out["details"] = self.details
        return out


class MalformedHeader(DrawError):
    code = "MALFORMED_HEADER"


class WrongBlockCount(DrawError):
    code = "WRONG_BLOCK_COUNT"


class InvalidBlockchain(DrawError):
    code = "INVALID_BLOCKCHAIN"
    reason = "invalid"


class InvalidProofOfWork(InvalidBlockchain):
    reason = "proof_of_work"


class DifficultyMismatch(InvalidBlockchain):
    reason = "difficulty_mismatch"


class BrokenChainLink(InvalidBlockchain):
    reason = "broken_link"


class IndexOutOfRange(DrawError):
    code = "INDEX_OUT_OF_RANGE"


class NotWinner(DrawError):
    code = "NOT_WINNER"


class SetupError(DrawError):
    code = "SETUP_ERROR"


class EmptyParticipantSet(SetupError):
    code = "EMPTY_PARTICIPANT_SET"


class DrawBlockNotInFuture(SetupError):
    code = "DRAW_BLOCK_NOT_IN_FUTURE"


class DuplicateTicket(SetupError):
    code = "DUPLICATE_TICKET"


class DrawNotFound(DrawError):
    code = "DRAW_NOT_FOUND"


class DrawAlreadyResolved(DrawError):
    code = "DRAW_ALREADY_RESOLVED"


class SourceError(DrawError):
    code = "SOURCE_ERROR"


class DrawExists(DrawError):
    code = "DRAW_EXISTS"


class InvalidDrawId(DrawError):
    code = "INVALID_DRAW_ID"


class DrawWindowTooLarge(SetupError):
    code = "DRAW_WINDOW_TOO_LARGE"
