from typing import List

from fastapi import APIRouter, Depends, Request

from ..auth import require_session
from ..schemas import CheckIn, Site, SiteCreate, SiteStatus
from ..services.monitor import Monitor

router = APIRouter()

def get_monitor(request: Request) -> Monitor:
    return request.app.state.monitor

@router.get("/health")
def health():
    return {"status": "ok"}

@router.get("/api/status", response_model=List[SiteStatus])
async def api_status(monitor: Monitor = Depends(get_monitor)):
    return await monitor.status()

@router.get("/api/websites", response_model=List[Site])
async def api_websites(monitor: Monitor = Depends(get_monitor)):
    return await monitor.registry.list()

@router.post("/api/websites", response_model=Site, dependencies=[Depends(require_session)])
async def api_add_website(payload: SiteCreate, monitor: Monitor = Depends(get_monitor)):
    return await monitor.registry.add(payload.name, payload.url)

@router.post("/api/check")
async def api_check(payload: CheckIn, monitor: Monitor = Depends(get_monitor)):
    await monitor.check_website(payload.website_id)
    return {"success": True}
