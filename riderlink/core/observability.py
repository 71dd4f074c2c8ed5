"""
Request logging middleware.

Propagates (or mints) an X-Request-ID, times the request, and logs one line
per request at a level chosen by the response status.
"""
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

log = logging.getLogger("riderlink.requests")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        start = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start) * 1000
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{duration_ms:.2f}"

        log_data = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
        }
        if response.status_code >= 500:
            log.error("%s %s -> %s", request.method, request.url.path, response.status_code, extra=log_data)
        elif response.status_code >= 400:
            log.warning("%s %s -> %s", request.method, request.url.path, response.status_code, extra=log_data)
        else:
            log.info("%s %s -> %s", request.method, request.url.path, response.status_code, extra=log_data)

        return response
