# services/store.py
import os, re, json, tempfile, threading, time
from typing import Any, Dict, List, Optional
from errors import DrawAlreadyResolved, DrawNotFound, InvalidDrawId
from settings import settings

# замок на процесс; между процессами полагаемся на os.replace
_LOCK = threading.Lock()

def _ensure_dir():
    os.makedirs(settings.STORE_DIR, exist_ok=True)

_DRAW_ID = re.compile(r"[A-Za-z0-9][A-Za-z0-9_-]{0,63}")

def check_draw_id(draw_id: str) -> str:
    """Id становится именем файла: только буквы, цифры, _ и -, без путей."""
    if not isinstance(draw_id, str) or not _DRAW_ID.fullmatch(draw_id):
        raise InvalidDrawId(f"invalid draw id: {draw_id!r}", drawId=str(draw_id))
    return draw_id

def _path(draw_id: str) -> str:
    check_draw_id(draw_id)
    return os.path.join(settings.STORE_DIR, f"{draw_id}.json")

def _write(record: Dict[str, Any]) -> None:
    draw_id = check_draw_id(record["drawId"])
    _ensure_dir()
    tmp_fd, tmp_path = tempfile.mkstemp(dir=settings.STORE_DIR, prefix=f".{draw_id}.", suffix=".tmp")
    with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
        json.dump(record, f, ensure_ascii=False, indent=2)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp_path, _path(draw_id))

def save_draw(record: Dict[str, Any]) -> None:
    """Атомарная запись JSON-снимка розыгрыша."""
    record.setdefault("createdAt", int(time.time() * 1000))
    record.setdefault("status", "open")
    with _LOCK:
        _write(record)

def load_draw(draw_id: str) -> Optional[Dict[str, Any]]:
    p = _path(draw_id)
    if not os.path.exists(p):
        return None
    with open(p, "r", encoding="utf-8") as f:
        return json.load(f)

def require_draw(draw_id: str) -> Dict[str, Any]:
    rec = load_draw(draw_id)
    if rec is None:
        raise DrawNotFound(f"draw {draw_id} not found", drawId=draw_id)
    return rec

def mark_resolved(draw_id: str, resolution: Dict[str, Any]) -> Dict[str, Any]:
    """
    open -> resolved ровно один раз. Второй вызов бросает DrawAlreadyResolved,
    запись при этом не меняется.
    """
    with _LOCK:
        rec = require_draw(draw_id)
        if rec.get("status") == "resolved":
            raise DrawAlreadyResolved(f"draw {draw_id} is already resolved",
                                      winner=(rec.get("resolution") or {}).get("winner"))
        rec["status"] = "resolved"
        rec["resolvedAt"] = int(time.time() * 1000)
        rec["resolution"] = resolution
        _write(rec)
        return rec

def list_draws(limit: int = 50, offset: int = 0) -> List[Dict[str, Any]]:
    _ensure_dir()
    items: List[Dict[str, Any]] = []
    for name in os.listdir(settings.STORE_DIR):
        if not name.endswith(".json"):
            continue
        with open(os.path.join(settings.STORE_DIR, name), "r", encoding="utf-8") as f:
            try:
                j = json.load(f)
            except json.JSONDecodeError:
                continue
        items.append({
            "drawId": j["drawId"],
            "createdAt": j.get("createdAt"),
            "status": j.get("status"),
            "drawBlockHeight": (j.get("state") or {}).get("drawBlockHeight"),
            "winner": (j.get("resolution") or {}).get("winner"),
        })
    items.sort(key=lambda x: x.get("createdAt") or 0, reverse=True)
    return items[offset:offset+limit]
