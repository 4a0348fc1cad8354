# api/draws.py
import logging
from time import time
from typing import List, Optional
from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from errors import (DrawAlreadyResolved, DrawError, DrawExists, DrawNotFound, DrawWindowTooLarge,
                    InvalidDrawId, MalformedHeader, NotWinner, SetupError, SourceError)
from models import (BitcoinDrawSetupIn, BitcoinResolveIn, DrawOut, DrawSetupIn, ParticipantIn,
                    ResolveIn, ResolveOut, ScoreOut)
from rng.hashing import blocks_root_hex
from services.resolve import Verdict, resolve
from services.setup import assign_tickets, validate_setup
from services.state import CurrentBlock, DrawState
from services.store import load_draw, mark_resolved, require_draw, save_draw
from settings import settings
from sources.bitcoin import current_block, fetch_header_run
from streams import hub

log = logging.getLogger(__name__)

router = APIRouter()

# порядок важен: первое совпадение по isinstance
_STATUS = (
    (SetupError, 400),
    (MalformedHeader, 400),
    (InvalidDrawId, 400),
    (NotWinner, 403),
    (DrawNotFound, 404),
    (DrawExists, 409),
    (DrawAlreadyResolved, 409),
    (SourceError, 502),
)


def error_response(e: DrawError) -> JSONResponse:
    status = next((code for cls, code in _STATUS if isinstance(e, cls)), 422)
    return JSONResponse(status_code=status, content=e.to_dict())


def _draw_out(record: dict) -> DrawOut:
    state = DrawState.from_dict(record["state"])
    return DrawOut(
        draw_id=record["drawId"],
        status=record["status"],
        blocks_expected=state.blocks_expected,
        first_block_height=state.current_block.height + 1,
        last_block_height=state.draw_block_height + state.blocks_for_verification,
        prize=state.prize,
        explorer_url=record.get("explorerUrl"),
        state=record["state"],
    )


async def _setup(draw_id: Optional[str], block: CurrentBlock, draw_block_height: int,
                 blocks_for_verification: Optional[int], hash_rounds: Optional[int],
                 participation_fee: int, participants: List[ParticipantIn],
                 explorer_url: Optional[str] = None):
    draw_id = draw_id or f"draw-{int(time()*1000)}"
    if load_draw(draw_id) is not None:
        return error_response(DrawExists(f"draw {draw_id} already exists", drawId=draw_id))

    try:
        tickets = assign_tickets((p.identity, p.ticket_id) for p in participants)
    except SetupError as e:
        return error_response(e)

    state = DrawState(
        current_block=block,
        draw_block_height=draw_block_height,
        blocks_for_verification=(settings.DEFAULT_BLOCKS_FOR_VERIFICATION
                                 if blocks_for_verification is None else blocks_for_verification),
        hash_rounds=settings.DEFAULT_HASH_ROUNDS if hash_rounds is None else hash_rounds,
        participants=tickets,
        participation_fee=participation_fee,
    )
    result = validate_setup(state)
    if not result.ok:
        return error_response(result.error)
    limit = settings.MAX_BLOCKS_AHEAD + settings.MAX_BLOCKS_FOR_VERIFICATION
    if state.blocks_expected > limit:
        return error_response(DrawWindowTooLarge(
            f"draw needs {state.blocks_expected} blocks, limit is {limit}",
            blocksExpected=state.blocks_expected, limit=limit))

    record = {"drawId": draw_id, "status": "open", "state": state.to_dict()}
    if explorer_url:
        record["explorerUrl"] = explorer_url
    save_draw(record)
    log.info("draw %s set up: %d participants, draw block %d", draw_id, len(tickets), draw_block_height)
    await hub.emit(draw_id, {
        "type": "setup", "drawId": draw_id,
        "drawBlockHeight": state.draw_block_height,
        "blocksExpected": state.blocks_expected,
        "participants": len(tickets),
        "explorerUrl": explorer_url,
    })
    return _draw_out(record)


@router.post("/draws", response_model=DrawOut)
async def draw_setup(body: DrawSetupIn = Body(...)):
    cb = body.current_block
    block = CurrentBlock(hash=cb.hash.lower(), height=cb.height, difficulty_target=cb.difficulty_target)
    return await _setup(body.draw_id, block, body.draw_block_height, body.blocks_for_verification,
                        body.hash_rounds, body.participation_fee, body.participants)


@router.post("/draws/bitcoin", response_model=DrawOut)
async def draw_setup_bitcoin(body: BitcoinDrawSetupIn = Body(...)):
    """Розыгрыш от текущей вершины Bitcoin: draw block = tip + blocks_ahead."""
    try:
        tip = await current_block()
    except SourceError as e:
        return error_response(e)
    block = CurrentBlock(hash=tip["hash"], height=tip["height"], difficulty_target=tip["difficultyTarget"])
    return await _setup(body.draw_id, block, block.height + body.blocks_ahead, body.blocks_for_verification,
                        body.hash_rounds, body.participation_fee, body.participants,
                        explorer_url=tip.get("explorerUrl"))


@router.get("/draws/{draw_id}", response_model=DrawOut)
async def draw_get(draw_id: str):
    try:
        return _draw_out(require_draw(draw_id))
    except DrawError as e:
        return error_response(e)


async def _emit_verdict(draw_id: str, claimant: str, verdict: Verdict):
    if verdict.winner is not None:
        # есть победитель, значит цепочка и маяк проверены
        await hub.emit(draw_id, {"type": "chain.verified", "drawId": draw_id,
                                 "drawBlockHash": verdict.winner.draw_block_hash})
        await hub.emit(draw_id, {"type": "beacon", "drawId": draw_id, "beacon": verdict.winner.beacon})
        await hub.emit(draw_id, {"type": "scores", "drawId": draw_id, "ranking": [
            {"identity": s.participant.identity, "ticketId": s.participant.ticket_id, "score": str(s.score)}
            for s in verdict.ranking
        ]})
    if not verdict.ok:
        await hub.emit(draw_id, {"type": "rejected", "drawId": draw_id, "claimant": claimant,
                                 **verdict.error.to_dict()})


async def _resolve(draw_id: str, blocks: List[bytes], claimant: str):
    rec = require_draw(draw_id)
    if rec.get("status") == "resolved":
        raise DrawAlreadyResolved(f"draw {draw_id} is already resolved",
                                  winner=(rec.get("resolution") or {}).get("winner"))
    state = DrawState.from_dict(rec["state"])

    await hub.emit(draw_id, {"type": "blocks.received", "drawId": draw_id,
                             "claimant": claimant, "blocks": len(blocks)})
    # sha-раунды маяка не должны держать event loop
    verdict = await run_in_threadpool(resolve, state, blocks, claimant)
    await _emit_verdict(draw_id, claimant, verdict)
    if not verdict.ok:
        raise verdict.error

    w = verdict.winner
    ranking = [ScoreOut(identity=s.participant.identity, ticket_id=s.participant.ticket_id, score=str(s.score))
               for s in verdict.ranking]
    mark_resolved(draw_id, {
        "winner": w.participant.identity,
        "ticketId": w.participant.ticket_id,
        "score": str(w.score),
        "beacon": w.beacon,
        "drawBlockHash": w.draw_block_hash,
        "blocksRootHex": blocks_root_hex(blocks),
        "ranking": [r.model_dump() for r in ranking],
    })
    await hub.emit(draw_id, {"type": "result", "drawId": draw_id, "winner": w.participant.identity,
                             "ticketId": w.participant.ticket_id, "beacon": w.beacon})
    return ResolveOut(
        draw_id=draw_id,
        winner=w.participant.identity,
        ticket_id=w.participant.ticket_id,
        score=str(w.score),
        beacon=w.beacon,
        draw_block_hash=w.draw_block_hash,
        prize=state.prize,
        ranking=ranking,
    )


@router.post("/draws/{draw_id}/resolve", response_model=ResolveOut)
async def draw_resolve(draw_id: str, body: ResolveIn = Body(...)):
    try:
        blocks = [bytes.fromhex(h) for h in body.blocks_hex]
    except ValueError:
        return error_response(MalformedHeader("blocks_hex must be hex"))
    try:
        return await _resolve(draw_id, blocks, body.claimant)
    except DrawError as e:
        return error_response(e)


@router.post("/draws/{draw_id}/resolve/bitcoin", response_model=ResolveOut)
async def draw_resolve_bitcoin(draw_id: str, body: BitcoinResolveIn = Body(...)):
    """То же, но прогон блоков тянем из Bitcoin API сами."""
    try:
        state = DrawState.from_dict(require_draw(draw_id)["state"])
        blocks = await fetch_header_run(state.current_block.height + 1, state.blocks_expected)
        return await _resolve(draw_id, blocks, body.claimant)
    except DrawError as e:
        return error_response(e)
