"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API starts without any configuration; in a production deployment
override them via environment variables.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Event Management API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    # All routes are mounted under this prefix (``/api/events`` etc.).
    api_prefix: str = os.getenv("API_PREFIX", "/api")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional path of a log file in addition to the console handler.
    log_file: str = os.getenv("LOG_FILE", "")

    # Path or connection string for the SQLite database.  If a
    # relative path is provided, it will be resolved relative to the
    # project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "event_management.db")

    # Pagination defaults for list endpoints.
    page_size: int = int(os.getenv("PAGE_SIZE", "15"))
    max_page_size: int = int(os.getenv("MAX_PAGE_SIZE", "100"))

    # Requests allowed per minute for one user (or one IP when
    # anonymous).  ``0`` disables the limiter.
    rate_limit_per_minute: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", "60"))

    # Name stored with every personal access token issued on login.
    token_name: str = os.getenv("TOKEN_NAME", "api-token")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes values at class creation time, environment variables should
# be set before importing this module.
settings = Settings()
