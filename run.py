"""Entry point for serving the Event Management API.

Launches the FastAPI application with uvicorn.  Host, port and reload
mode are read from environment variables so the same file works for
local development, Docker or a process manager.

Usage:
    python run.py
"""
import logging
import os

from uvicorn import Config, Server


def main() -> None:
    """Start the API using Uvicorn.

    Host and port are read from environment variables ``API_HOST`` and
    ``API_PORT``.  Defaults are ``0.0.0.0`` and ``8000``.
    """
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    reload = os.getenv("API_RELOAD", "false").lower() in {"1", "true", "yes"}
    config = Config(
        app="event_management_api.app.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
    server = Server(config)
    server.run()


if __name__ == "__main__":
    try:
        main()
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Server stopped")
