"""
Adoption Intake Backend: Request Logging Middleware
======================================================

What:  One access log line per request, tagged with the application or
       document it touched.
How:   Level follows the status class: 5xx → ERROR, 4xx → WARNING,
       everything else → INFO. Workflow refusals (409 illegal transition,
       422 missing documents) are normal citizen traffic and stay at INFO.
       /health probes are not logged.

What is logged (no bodies: application_data holds personal details):
    method, path, status, duration, client IP, request ID,
    application_id / document_id when the path names one
"""

import logging
import re
import time
from typing import Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from intake.middleware.request_id import request_id_var

logger = logging.getLogger("intake.access")

_RESOURCE_PATTERNS = {
    "application_id": re.compile(r"^/api/applications/(\d+)"),
    "document_id": re.compile(r"^/api/documents/(\d+)"),
}

# Responses raised by lifecycle rules rather than by a broken client.
WORKFLOW_STATUSES = frozenset({409, 422})


def resource_ids(path: str) -> Dict[str, int]:
    """Ids embedded in an /api path, e.g. {"application_id": 12}."""
    ids = {}
    for key, pattern in _RESOURCE_PATTERNS.items():
        match = pattern.match(path)
        if match:
            ids[key] = int(match.group(1))
    return ids


def level_for(status: int, path: str) -> int:
    if status >= 500:
        return logging.ERROR
    if status in WORKFLOW_STATUSES and path.startswith("/api/applications/"):
        return logging.INFO
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path == "/health":
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        ids = resource_ids(path)
        target: Optional[str] = " ".join(f"{k}={v}" for k, v in ids.items()) or None

        logger.log(
            level_for(status, path),
            "%s %s %d %.1fms [%s] from %s%s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            f" ({target})" if target else "",
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                **ids,
            },
        )
        return response
