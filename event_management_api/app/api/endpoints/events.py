"""
Event endpoints.

Listing and reading are public; creating requires a bearer token, and
updating or deleting additionally requires owning the event.  List,
read and write responses honour the ``include`` query parameter (see
``core.relations``).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from event_management_api.app.core.pagination import PageParams, page_params
from event_management_api.app.core.security import Actor, get_current_user
from event_management_api.app.schemas.common import Page
from event_management_api.app.schemas.event import EventCreate, EventRead, EventUpdate
from event_management_api.app.services.event_service import EventService

router = APIRouter()

INCLUDE = Query(
    None,
    description="Comma‑separated relations to load: user, attendees, attendees.user",
)


@router.get("", response_model=Page[EventRead], response_model_exclude_unset=True)
async def list_events(
    params: PageParams = Depends(page_params),
    include: Optional[str] = INCLUDE,
) -> Page[EventRead]:
    """List events, newest first, one page at a time."""
    return await EventService.list_events(params, include)


@router.post(
    "",
    response_model=EventRead,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_event(
    event: EventCreate,
    include: Optional[str] = INCLUDE,
    actor: Actor = Depends(get_current_user),
) -> EventRead:
    """Create a new event owned by the authenticated user."""
    return await EventService.create_event(event, actor, include)


@router.get("/{event_id}", response_model=EventRead, response_model_exclude_unset=True)
async def get_event(
    event_id: int = Path(..., description="ID of the event"),
    include: Optional[str] = INCLUDE,
) -> EventRead:
    """Retrieve a single event with its owner and attendees."""
    return await EventService.get_event(event_id, include)


@router.put("/{event_id}", response_model=EventRead, response_model_exclude_unset=True)
async def update_event(
    updates: EventUpdate,
    event_id: int = Path(..., description="ID of the event"),
    include: Optional[str] = INCLUDE,
    actor: Actor = Depends(get_current_user),
) -> EventRead:
    """Update an event.  Only the owner may do this; omitted fields stay unchanged."""
    return await EventService.update_event(event_id, updates, actor, include)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: int = Path(..., description="ID of the event"),
    actor: Actor = Depends(get_current_user),
) -> None:
    """Delete an event and its attendees.  Only the owner may do this."""
    await EventService.delete_event(event_id, actor)
