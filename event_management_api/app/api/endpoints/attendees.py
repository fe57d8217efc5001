"""
Attendee endpoints, nested under ``/events/{event_id}/attendees``.

Anyone may list or read attendees.  Registering requires a bearer
token and always registers the authenticated user.  Removing a
registration is allowed for the event owner and the registered user.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from event_management_api.app.core.pagination import PageParams, page_params
from event_management_api.app.core.security import Actor, get_current_user
from event_management_api.app.schemas.attendee import AttendeeRead
from event_management_api.app.schemas.common import Page
from event_management_api.app.services.attendee_service import AttendeeService

router = APIRouter()

INCLUDE = Query(None, description="Comma‑separated relations to load: user")


@router.get(
    "/events/{event_id}/attendees",
    response_model=Page[AttendeeRead],
    response_model_exclude_unset=True,
)
async def list_attendees(
    event_id: int = Path(..., description="ID of the event"),
    params: PageParams = Depends(page_params),
    include: Optional[str] = INCLUDE,
) -> Page[AttendeeRead]:
    """List the event's attendees, newest first."""
    return await AttendeeService.list_attendees(event_id, params, include)


@router.post(
    "/events/{event_id}/attendees",
    response_model=AttendeeRead,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_attendee(
    event_id: int = Path(..., description="ID of the event to attend"),
    include: Optional[str] = INCLUDE,
    actor: Actor = Depends(get_current_user),
) -> AttendeeRead:
    """Register the authenticated user for the event.

    Returns 422 if the user is already registered.
    """
    return await AttendeeService.create_attendee(event_id, actor, include)


@router.get(
    "/events/{event_id}/attendees/{attendee_id}",
    response_model=AttendeeRead,
    response_model_exclude_unset=True,
)
async def get_attendee(
    event_id: int = Path(..., description="ID of the event"),
    attendee_id: int = Path(..., description="ID of the attendee"),
    include: Optional[str] = INCLUDE,
) -> AttendeeRead:
    return await AttendeeService.get_attendee(event_id, attendee_id, include)


@router.delete("/events/{event_id}/attendees/{attendee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attendee(
    event_id: int = Path(..., description="ID of the event"),
    attendee_id: int = Path(..., description="ID of the attendee"),
    actor: Actor = Depends(get_current_user),
) -> None:
    """Remove a registration (event owner or the attendee themself)."""
    await AttendeeService.delete_attendee(event_id, attendee_id, actor)
