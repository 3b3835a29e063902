import time
from datetime import datetime, timezone
from typing import Optional

def now_ts() -> float:
    return time.time()

def now_iso() -> str:
    """UTC timestamp as ``2024-01-31T12:00:00.000Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

def parse_ts(value: str) -> Optional[float]:
    """ISO-8601 string -> unix seconds, None if unparseable. Naive values are read as UTC."""
    if not value:
        return None
    raw = value.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()
