# api/history.py
from fastapi import APIRouter
from errors import DrawError, DrawNotFound
from services.store import list_draws, load_draw
from api.draws import error_response

router = APIRouter()

@router.get("/history")
async def history_list(limit: int = 50, offset: int = 0):
    return {"items": list_draws(limit, offset)}

@router.get("/history/{draw_id}")
async def history_item(draw_id: str):
    try:
        rec = load_draw(draw_id)
    except DrawError as e:
        return error_response(e)
    if not rec:
        return error_response(DrawNotFound(f"draw {draw_id} not found", drawId=draw_id))
    return rec
