"""Latest-status record and bounded per-site probe history.

Keys:
    status:{id}   last ProbeResult, overwritten on every probe
    history:{id}  JSON list of ProbeResult, most recent first, at most ``max_items``
"""
import json
from typing import Any, List, Optional

import structlog
from pydantic import ValidationError

from ..schemas import ProbeResult, Site
from .store import KVStore

logger = structlog.get_logger(__name__)

MAX_HISTORY_ITEMS = 100

def status_key(site_id: str) -> str:
    return f"status:{site_id}"

def history_key(site_id: str) -> str:
    return f"history:{site_id}"

def coerce_history(raw: Optional[str], key: str = "") -> List[ProbeResult]:
    """
    Best-effort decode of a stored history value.
    Missing, unparseable or non-list values give []; invalid entries are skipped.
    """
    if not raw:
        return []
    try:
        data: Any = json.loads(raw)
    except ValueError as ex:
        logger.warning("history_corrupt", key=key, error=str(ex))
        return []
    if not isinstance(data, list):
        logger.warning("history_corrupt", key=key, error="not a list")
        return []

    out: List[ProbeResult] = []
    for item in data:
        try:
            out.append(ProbeResult.model_validate(item))
        except ValidationError:
            continue
    return out

def push(history: List[ProbeResult], result: ProbeResult, max_items: int = MAX_HISTORY_ITEMS) -> List[ProbeResult]:
    return [result, *history][:max_items]

def dump_history(history: List[ProbeResult]) -> str:
    return json.dumps([r.model_dump(by_alias=True) for r in history])

class HistoryTracker:
    def __init__(self, store: KVStore, max_items: int = MAX_HISTORY_ITEMS):
        self.store = store
        self.max_items = max_items

    async def record(self, site: Site, result: ProbeResult) -> None:
        await self.store.put(status_key(site.id), result.model_dump_json(by_alias=True))

        key = history_key(site.id)
        history = coerce_history(await self.store.get(key), key)
        await self.store.put(key, dump_history(push(history, result, self.max_items)))

    async def history(self, site_id: str) -> List[ProbeResult]:
        key = history_key(site_id)
        return coerce_history(await self.store.get(key), key)

    async def latest(self, site_id: str) -> Optional[ProbeResult]:
        raw = await self.store.get(status_key(site_id))
        if not raw:
            return None
        try:
            return ProbeResult.model_validate_json(raw)
        except ValidationError:
            logger.warning("status_corrupt", key=status_key(site_id))
            return None
