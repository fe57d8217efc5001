"""
Logging configuration for the API.

``setup_logging`` attaches a console handler (and a file handler when
``LOG_FILE`` is set) to the root logger, taking level and file from
``settings`` unless given explicitly.  Every record is stamped with
the id of the request being served, which ``RequestLogMiddleware``
stores in ``request_id_var``; records logged outside a request show
``-``.
"""

import logging
from contextvars import ContextVar
from pathlib import Path
from typing import Optional

from .config import settings

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(request_id)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class RequestIdFilter(logging.Filter):
    """Copy the current request id onto each record as ``request_id``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def _handler(handler: logging.Handler) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(RequestIdFilter())
    return handler


def setup_logging(level: Optional[str] = None, logfile: Optional[str] = None) -> None:
    """Configure the root logger once.

    Parameters
    ----------
    level : Optional[str]
        Level name, case insensitive.  Defaults to ``settings.log_level``;
        unknown names fall back to ``INFO``.
    logfile : Optional[str]
        File to log to in addition to the console.  Defaults to
        ``settings.log_file``; empty means console only.
    """
    root = logging.getLogger()
    if root.handlers:
        # pytest's capture handler or an earlier ``create_app`` call.
        return

    level = level or settings.log_level
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.addHandler(_handler(logging.StreamHandler()))

    logfile = logfile or settings.log_file
    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        root.addHandler(_handler(logging.FileHandler(log_path, encoding="utf-8")))
