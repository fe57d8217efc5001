"""
Application package initializer.

The project is organised into logical pieces: ``core`` holds
configuration, database access, security and other cross‑cutting
helpers; ``schemas`` the Pydantic payload models; ``services`` the
business logic per domain (events, attendees, users/tokens); and
``api`` the FastAPI routers that expose the services over HTTP.
"""

from .main import app  # noqa: F401
