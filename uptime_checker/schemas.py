from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Wire and store payloads use camelCase keys (createdAt, responseTimeMs, ...)
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class Site(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)
    id: str
    name: str
    url: str
    created_at: str

class ProbeResult(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)
    url: str
    name: str
    status: Literal["up", "down"]
    response_time_ms: int = Field(ge=0)
    status_code: int = Field(default=0, ge=0)
    error: Optional[str] = None
    timestamp: str

    @property
    def is_up(self) -> bool:
        return self.status == "up"

class SiteStatus(Site):
    current_status: Optional[ProbeResult] = None
    history: List[ProbeResult] = []
    uptime_percent: int = 0
    average_response_time_ms: int = 0

# Missing fields default to "" so the registry reports them as InvalidInput (400)
class SiteCreate(CamelModel):
    name: str = ""
    url: str = ""

class CheckIn(CamelModel):
    website_id: str = ""

class LoginIn(CamelModel):
    password: str = ""
