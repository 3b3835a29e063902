import math
from typing import Iterable, Optional

from ..schemas import ProbeResult
from .clock import now_ts, parse_ts

UPTIME_WINDOW_S = 24 * 60 * 60

def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))

def window(history: Iterable[ProbeResult], now: float, window_s: float = UPTIME_WINDOW_S) -> list:
    out = []
    for r in history:
        ts = parse_ts(r.timestamp)
        if ts is not None and now - ts < window_s:
            out.append(r)
    return out

def uptime_percent(history: Iterable[ProbeResult], now: Optional[float] = None,
                   window_s: float = UPTIME_WINDOW_S) -> int:
    """Share of "up" results within the trailing window, 0..100. No results in window -> 0."""
    recent = window(history, now_ts() if now is None else now, window_s)
    if not recent:
        return 0
    ups = sum(1 for r in recent if r.is_up)
    return round_half_up(100.0 * ups / len(recent))

def average_response_time_ms(history: Iterable[ProbeResult]) -> int:
    """Mean response time over results with a positive time. None -> 0."""
    times = [r.response_time_ms for r in history if r.response_time_ms > 0]
    if not times:
        return 0
    return round_half_up(sum(times) / len(times))
