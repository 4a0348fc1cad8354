# sources/bitcoin.py
import asyncio, logging
import httpx
from typing import Any, Dict, List
from errors import SourceError
from settings import settings

log = logging.getLogger(__name__)

EXPLORER_BLOCK = "https://blockstream.info/block/{}"

def _client(timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=settings.BTC_API_BASE, timeout=timeout)

async def _get(path: str, timeout: float | None = None) -> httpx.Response:
    try:
        async with _client(timeout or settings.HTTP_TIMEOUT) as cli:
            r = await cli.get(path)
            r.raise_for_status()
            return r
    except httpx.HTTPError as e:
        # наверх уходит уже наша ошибка, с путём запроса
        raise SourceError(f"Bitcoin API error on {path}: {e}", path=path) from e

async def get_tip_height() -> int:
    r = await _get("/blocks/tip/height")
    return int(r.text.strip())

async def get_block_hash(height: int) -> str:
    r = await _get(f"/block-height/{height}")
    return r.text.strip()

async def get_block_info(block_hash: str) -> Dict[str, Any]:
    r = await _get(f"/block/{block_hash}")
    return r.json()

async def get_header(block_hash: str) -> bytes:
    """Сырой 80-байтовый заголовок (API отдаёт его hex-строкой)."""
    r = await _get(f"/block/{block_hash}/header")
    try:
        return bytes.fromhex(r.text.strip())
    except ValueError as e:
        raise SourceError(f"header of {block_hash} is not hex", hash=block_hash) from e

async def current_block() -> Dict[str, Any]:
    """Вершина цепочки: hash/height/difficultyTarget для setup."""
    height = await get_tip_height()
    block_hash = await get_block_hash(height)
    info = await get_block_info(block_hash)
    return {
        "hash": block_hash,
        "height": height,
        "difficultyTarget": int(info["bits"]),
        "explorerUrl": EXPLORER_BLOCK.format(block_hash),
    }

async def _gather_with_limit(tasks, limit: int):
    sem = asyncio.Semaphore(limit)
    async def run(coro):
        async with sem:
            return await coro
    jobs = [asyncio.ensure_future(run(t)) for t in tasks]
    try:
        return await asyncio.gather(*jobs)
    except BaseException:
        # первая ошибка решает исход, остальные запросы не нужны
        for j in jobs:
            j.cancel()
        await asyncio.gather(*jobs, return_exceptions=True)
        # задача, снятая до старта, не дошла до своей корутины
        for t in tasks:
            t.close()
        raise

async def _header_at(height: int) -> bytes:
    return await get_header(await get_block_hash(height))

async def fetch_header_run(first_height: int, count: int) -> List[bytes]:
    """
    Заголовки блоков [first_height .. first_height+count-1] по возрастанию.
    Если последний блок ещё не добыт (с учётом BTC_CONFIRMATIONS), бросаем SourceError.
    """
    if count <= 0:
        return []
    last_height = first_height + count - 1
    tip = await get_tip_height()
    if tip < last_height + settings.BTC_CONFIRMATIONS:
        raise SourceError(
            f"block {last_height} is not mined yet (tip {tip}, confirmations {settings.BTC_CONFIRMATIONS})",
            tip=tip, lastHeight=last_height,
        )

    heights = list(range(first_height, last_height + 1))
    headers = await _gather_with_limit([_header_at(h) for h in heights], limit=settings.BTC_FETCH_CONCURRENCY)
    log.info("fetched %d headers %d..%d", len(headers), first_height, last_height)
    return list(headers)
