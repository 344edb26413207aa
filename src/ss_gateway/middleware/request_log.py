"""Request logging middleware.

One log line per request with method, path, status, latency and request ID.
The ID is taken from an incoming X-Request-ID header (set by the load
balancer) or generated, stored on request.state for the error envelope, and
echoed back in the response header.

Load-balancer probes (`/`, `/health`) log at DEBUG; 5xx (including the 503
served until the cache is ready) logs at WARNING.

Log format:
    INFO [GET] /api/v1/circulating-supply → 200 (1ms) req_a1b2c3d4e5f6
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("ss.request")

REQUEST_ID_HEADER = "X-Request-ID"
PROBE_PATHS = frozenset({"/", "/health"})


def _request_id(request: Request) -> str:
    incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
    if incoming and len(incoming) <= 64:
        return incoming
    return f"req_{uuid.uuid4().hex[:12]}"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _request_id(request)
        request.state.request_id = request_id

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        if response.status_code >= 500:
            level = logging.WARNING
        elif request.url.path in PROBE_PATHS:
            level = logging.DEBUG
        else:
            level = logging.INFO
        logger.log(
            level,
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
