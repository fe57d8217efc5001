"""
Service layer abstraction.

Each service encapsulates business logic for a domain and talks to
the SQLite database through ``core.db``.  Handlers in ``api`` only
translate HTTP into service calls.
"""
