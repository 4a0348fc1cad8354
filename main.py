import logging
from fastapi import FastAPI
from settings import settings

from api.stream import router as stream_router
from api.draws import router as draws_router
from api.history import router as history_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Bitcoin Draw Verifier")

@app.get("/health")
def health():
    return {"ok": True}


# пути роутеров не пересекаются, порядок подключения неважен
app.include_router(stream_router)   # /draws/{draw_id}/stream
app.include_router(draws_router)    # /draws, /draws/bitcoin, /draws/{draw_id}/resolve
app.include_router(history_router)  # /history
