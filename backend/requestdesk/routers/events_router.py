"""Form support routes: event list and version"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from requestdesk import __version__
from requestdesk.core.dependencies import get_desk_config
from requestdesk.models import DeskConfig

router = APIRouter(tags=["form"])


class EventsResponse(BaseModel):
    events: list[str]
    default_event: str | None = Field(default=None, serialization_alias="defaultEvent")


class VersionResponse(BaseModel):
    version: str


@router.get("/events", response_model=EventsResponse)
async def get_events(config: DeskConfig = Depends(get_desk_config)) -> EventsResponse:
    """Enabled events for the form dropdown, plus the one to pre-select."""
    default_event = config.default_event.value if config.default_event else None
    return EventsResponse(events=config.event_names, default_event=default_event)


@router.get("/version", response_model=VersionResponse)
async def get_version() -> VersionResponse:
    return VersionResponse(version=__version__)
