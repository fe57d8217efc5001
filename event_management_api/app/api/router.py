"""
Top‑level API router.

Aggregates the domain routers.  The rate limiter is attached here so
it runs before authentication and handler logic on every API route.
"""

from fastapi import APIRouter, Depends

from event_management_api.app.core.rate_limit import enforce_rate_limit

from .endpoints import attendees, auth, events

router = APIRouter(dependencies=[Depends(enforce_rate_limit)])

router.include_router(auth.router, tags=["auth"])
router.include_router(events.router, prefix="/events", tags=["events"])
# The attendees router declares its full nested paths itself.
router.include_router(attendees.router, tags=["attendees"])
