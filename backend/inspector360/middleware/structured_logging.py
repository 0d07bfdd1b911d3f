# backend/inspector360/middleware/structured_logging.py
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..config import settings

log = logging.getLogger("inspector360.request")


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """
    One http_request line per request:
      method, path, status_code, latency_ms, user_email, station

    Runs inside RequestIDMiddleware, so request.state.request_id is already set
    and the JSON formatter adds it too.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        t0 = time.perf_counter()

        # Header identity is good enough for the access line; handlers resolve the real principal.
        user_email = request.headers.get(settings.dev_header_user_email)
        station = request.headers.get(settings.dev_header_user_station)

        request_id: Optional[str] = getattr(request.state, "request_id", None)

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            latency_ms = int((time.perf_counter() - t0) * 1000)
            log.info(
                "http_request %s %s -> %s (%sms) rid=%s",
                request.method,
                request.url.path,
                status_code,
                latency_ms,
                request_id,
                extra={"user_email": user_email, "station": station, "status": status_code},
            )
