import asyncio
from typing import Callable, List, Optional

import httpx
import structlog

from ..config import Settings
from ..schemas import ProbeResult, Site, SiteStatus
from . import aggregator
from .history import HistoryTracker
from .prober import probe
from .registry import Registry
from .store import KVStore

logger = structlog.get_logger(__name__)

ClientFactory = Callable[[], httpx.AsyncClient]

def default_client() -> httpx.AsyncClient:
    # sweeps fan out to every site at once, so the pool must not queue requests
    limits = httpx.Limits(max_connections=None, max_keepalive_connections=20)
    return httpx.AsyncClient(limits=limits)

class Monitor:
    """Probe-and-record engine: scheduled sweeps, manual checks and status reads."""

    def __init__(self, store: KVStore, settings: Optional[Settings] = None,
                 client_factory: Optional[ClientFactory] = None):
        self.settings = settings or Settings()
        self.store = store
        self.registry = Registry(store)
        self.tracker = HistoryTracker(store, max_items=self.settings.MAX_HISTORY_ITEMS)
        self.client_factory = client_factory or default_client

    async def _check_one(self, client: httpx.AsyncClient, site: Site) -> ProbeResult:
        result = await probe(client, site,
                             timeout_s=self.settings.CHECK_TIMEOUT_S,
                             user_agent=self.settings.USER_AGENT)
        await self.tracker.record(site, result)
        logger.info("website_checked", url=site.url, status=result.status,
                    status_code=result.status_code, response_time_ms=result.response_time_ms)
        return result

    async def _check_isolated(self, client: httpx.AsyncClient, site: Site) -> Optional[ProbeResult]:
        try:
            return await self._check_one(client, site)
        except Exception as ex:
            logger.exception("website_check_failed", id=site.id, url=site.url, error=str(ex))
            return None

    async def sweep(self) -> List[ProbeResult]:
        """Probe every registered site concurrently. Returns the results that were recorded."""
        sites = await self.registry.list()
        if not sites:
            logger.info("sweep_skipped", reason="no websites configured")
            return []

        logger.info("sweep_started", websites=len(sites))
        async with self.client_factory() as client:
            outcomes = await asyncio.gather(*[self._check_isolated(client, s) for s in sites])
        results = [r for r in outcomes if r is not None]
        logger.info("sweep_finished", websites=len(sites), recorded=len(results),
                    failed=len(sites) - len(results))
        return results

    async def check_website(self, site_id: str) -> ProbeResult:
        """Manual check of one site. Raises NotFound for an unknown id."""
        site = await self.registry.find(site_id)
        async with self.client_factory() as client:
            return await self._check_one(client, site)

    async def site_status(self, site: Site, now: Optional[float] = None) -> SiteStatus:
        current, history = await asyncio.gather(
            self.tracker.latest(site.id),
            self.tracker.history(site.id),
        )
        return SiteStatus(
            **site.model_dump(),
            current_status=current,
            history=history,
            uptime_percent=aggregator.uptime_percent(history, now, self.settings.UPTIME_WINDOW_S),
            average_response_time_ms=aggregator.average_response_time_ms(history),
        )

    async def status(self, now: Optional[float] = None) -> List[SiteStatus]:
        sites = await self.registry.list()
        return list(await asyncio.gather(*[self.site_status(s, now) for s in sites]))
