import json
import random
import string
from typing import List

import structlog
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from ..errors import InvalidInput, NotFound
from ..schemas import Site
from .clock import now_iso
from .store import KVStore

logger = structlog.get_logger(__name__)

WEBSITES_KEY = "websites"
ID_ALPHABET = string.ascii_lowercase + string.digits
ID_LENGTH = 9

def generate_id() -> str:
    return "".join(random.choices(ID_ALPHABET, k=ID_LENGTH))

_HTTP_URL = TypeAdapter(AnyHttpUrl)

def validate_url(url: str) -> str:
    """Absolute http(s) URL with a valid host. The value is stored as given, not normalised."""
    try:
        _HTTP_URL.validate_python(url)
    except ValidationError:
        raise InvalidInput("Invalid URL format")
    return url

def load_sites(raw: str | None) -> List[Site]:
    if not raw:
        return []
    try:
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError("websites must be a list")
    except ValueError as e:
        logger.warning("registry_corrupt", error=str(e))
        return []

    sites = []
    for item in data:
        try:
            sites.append(Site.model_validate(item))
        except ValidationError as e:
            logger.warning("registry_entry_skipped", entry=item, error=str(e))
    return sites

class Registry:
    """Monitored websites, stored as one JSON array under ``websites``."""

    def __init__(self, store: KVStore):
        self.store = store

    async def list(self) -> List[Site]:
        return load_sites(await self.store.get(WEBSITES_KEY))

    async def find(self, site_id: str) -> Site:
        for site in await self.list():
            if site.id == site_id:
                return site
        raise NotFound("Website not found")

    async def add(self, name: str, url: str) -> Site:
        name = (name or "").strip()
        url = (url or "").strip()
        if not name or not url:
            raise InvalidInput("Name and URL are required")
        validate_url(url)

        sites = await self.list()
        taken = {s.id for s in sites}
        site_id = generate_id()
        while site_id in taken:
            site_id = generate_id()

        site = Site(id=site_id, name=name, url=url, created_at=now_iso())
        sites.append(site)
        await self.store.put(WEBSITES_KEY, json.dumps([s.model_dump(by_alias=True) for s in sites]))
        logger.info("website_added", id=site.id, url=site.url)
        return site
