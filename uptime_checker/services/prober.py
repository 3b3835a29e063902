"""Single HTTP probe of a registered website."""
import asyncio
import time
from typing import Optional, Tuple

import httpx
import structlog

from ..errors import NetworkFailure
from ..schemas import ProbeResult, Site
from .clock import now_iso

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_S = 30.0
DEFAULT_USER_AGENT = "Uptime-Checker/1.0"

# 2xx plus the redirect/not-modified family count as "up"
SUCCESS_STATUS_CODES = frozenset([200, 201, 202, 203, 204, 205, 206, 301, 302, 303, 304, 307, 308])

def is_success(status_code: int) -> bool:
    return status_code in SUCCESS_STATUS_CODES

def _describe(ex: BaseException) -> str:
    # httpx timeouts often carry an empty message
    return str(ex) or ex.__class__.__name__

async def _fetch(client: httpx.AsyncClient, url: str, timeout_s: float, user_agent: str) -> int:
    # httpx.Timeout bounds each phase and redirect hop; wait_for bounds the whole request
    try:
        r = await asyncio.wait_for(
            client.get(
                url,
                headers={"User-Agent": user_agent},
                follow_redirects=True,
                timeout=httpx.Timeout(timeout_s),
            ),
            timeout=timeout_s,
        )
    except asyncio.TimeoutError as ex:
        raise NetworkFailure(f"Timed out after {timeout_s:g}s") from ex
    except (httpx.HTTPError, httpx.InvalidURL) as ex:
        raise NetworkFailure(_describe(ex)) from ex
    return r.status_code

def classify(status_code: int) -> Tuple[str, Optional[str]]:
    if is_success(status_code):
        return "up", None
    return "down", f"HTTP {status_code}"

async def probe(
    client: httpx.AsyncClient,
    site: Site,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    user_agent: str = DEFAULT_USER_AGENT,
) -> ProbeResult:
    """GET ``site.url`` once and classify the outcome. Never raises for network problems."""
    started = time.monotonic()
    code = 0
    try:
        code = await _fetch(client, site.url, timeout_s, user_agent)
        status_txt, err = classify(code)
    except NetworkFailure as ex:
        status_txt, err = "down", str(ex)
        logger.warning("probe_failed", url=site.url, error=err)
    elapsed_ms = max(0, int((time.monotonic() - started) * 1000))

    return ProbeResult(
        url=site.url,
        name=site.name,
        status=status_txt,
        response_time_ms=elapsed_ms,
        status_code=code,
        error=err,
        timestamp=now_iso(),
    )
