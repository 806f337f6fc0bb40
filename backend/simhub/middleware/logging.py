"""
SimHub Backend — Request Logging Middleware
===========================================

What:  One access-log line per request on the "simhub.access" logger.
How:   Level follows the status class so alerting can key on severity:
           5xx → ERROR     (server fault, investigate)
           4xx → WARNING   (client error: validation, not found, rule violated)
           else → INFO
       /health is skipped; probes would drown everything else.

Logged: method, path, status, duration, request id, client ip.
Not logged: bodies or query values (project paths may be user-identifying).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from simhub.middleware.request_id import request_id_var

logger = logging.getLogger("simhub.access")

_QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in _QUIET_PATHS:
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"
        status = response.status_code
        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
