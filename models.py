from pydantic import BaseModel, Field
from typing import List, Optional
from settings import settings

DRAW_ID_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9_-]{0,63}$"

class CurrentBlockIn(BaseModel):
    hash: str = Field(..., min_length=64, max_length=64, description="display-hex хеш блока")
    height: int = Field(..., ge=0)
    difficulty_target: int = Field(..., ge=0, description="nBits (compact)")

class ParticipantIn(BaseModel):
    identity: str = Field(..., min_length=1)
    ticket_id: Optional[int] = Field(None, ge=0, description="по умолчанию: позиция в списке")

class DrawSetupIn(BaseModel):
    draw_id: Optional[str] = Field(None, pattern=DRAW_ID_PATTERN)
    current_block: CurrentBlockIn
    draw_block_height: int = Field(..., ge=0)
    blocks_for_verification: Optional[int] = Field(None, ge=0, le=settings.MAX_BLOCKS_FOR_VERIFICATION)
    hash_rounds: Optional[int] = Field(None, ge=0, le=settings.MAX_HASH_ROUNDS)
    participation_fee: int = Field(0, ge=0)
    # организатор идёт первым
    participants: List[ParticipantIn]

class BitcoinDrawSetupIn(BaseModel):
    draw_id: Optional[str] = Field(None, pattern=DRAW_ID_PATTERN)
    # на сколько блоков вперёд от текущей вершины цепочки
    blocks_ahead: int = Field(1, ge=1, le=settings.MAX_BLOCKS_AHEAD)
    blocks_for_verification: Optional[int] = Field(None, ge=0, le=settings.MAX_BLOCKS_FOR_VERIFICATION)
    hash_rounds: Optional[int] = Field(None, ge=0, le=settings.MAX_HASH_ROUNDS)
    participation_fee: int = Field(0, ge=0)
    participants: List[ParticipantIn]

class DrawOut(BaseModel):
    draw_id: str
    status: str
    blocks_expected: int
    first_block_height: int
    last_block_height: int
    prize: int
    explorer_url: Optional[str] = None
    state: dict

class ResolveIn(BaseModel):
    claimant: str = Field(..., min_length=1)
    blocks_hex: List[str] = Field(..., description="сырые 80-байтовые заголовки, hex, по возрастанию высоты")

class BitcoinResolveIn(BaseModel):
    claimant: str = Field(..., min_length=1)

class ScoreOut(BaseModel):
    identity: str
    ticket_id: int
    score: str

class ResolveOut(BaseModel):
    draw_id: str
    winner: str
    ticket_id: int
    score: str
    beacon: str
    draw_block_hash: str
    prize: int
    ranking: List[ScoreOut]
