"""
Request logging middleware.

``RequestLogMiddleware`` stamps every request with a UUID, returns it
in the ``X-Request-ID`` response header and logs method, path, status code
and duration once the response is ready.  While the request is served
the id sits in ``request_id_var``, so every log line it produces
carries it.
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .logging_config import request_id_var

logger = logging.getLogger(__name__)


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            start = time.perf_counter()
            response = await call_next(request)
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            response.headers["X-Request-ID"] = request_id
            logger.info(
                "%s %s -> %s in %sms",
                request.method, request.url.path, response.status_code, duration_ms,
            )
            return response
        finally:
            request_id_var.reset(token)
