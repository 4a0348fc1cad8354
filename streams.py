import asyncio, json
from typing import AsyncGenerator, Dict, List, Tuple

class StreamHub:
    def __init__(self, heartbeat: float = 2.0):
        self._subs: Dict[str, List[Tuple[asyncio.Queue, asyncio.Task]]] = {}
        self._heartbeat = heartbeat

    def subscribers(self, draw_id: str) -> int:
        return len(self._subs.get(draw_id, []))

    async def subscribe(self, draw_id: str) -> AsyncGenerator[str, None]:
        q: asyncio.Queue = asyncio.Queue()
        # пинги держат соединение живым и не дают прокси буферизовать поток
        async def _heartbeat():
            while True:
                await asyncio.sleep(self._heartbeat)
                q.put_nowait({"type": "ping", "t": asyncio.get_running_loop().time()})

        task = asyncio.create_task(_heartbeat())
        self._subs.setdefault(draw_id, []).append((q, task))
        try:
            # первичное событие, чтобы клиент понял, что подключение живо
            yield f"data: {json.dumps({'type':'connected','drawId': draw_id})}\n\n"
            while True:
                event = await q.get()
                yield f"data: {json.dumps(event)}\n\n"
        finally:
            task.cancel()
            subs = self._subs.get(draw_id) or []
            for i, (qq, _tt) in enumerate(list(subs)):
                if qq is q:
                    subs.pop(i)
                    break
            if not subs:
                self._subs.pop(draw_id, None)

    async def emit(self, draw_id: str, event: dict):
        for q, _task in self._subs.get(draw_id, []):
            q.put_nowait(event)

hub = StreamHub()
