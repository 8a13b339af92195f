"""
HotOrNot Backend — Request Logging Middleware
===============================================

What:  One access-log line per API request.
How:   Times call_next and logs once the response is ready. By then routing
       has filled in the scope, so the line also carries the matched route
       template and, on image/vote routes, the image id.

Example:
    POST /api/vote/{image_id} image=42 200 3.1ms [1f2e3d4c]

Not logged: request bodies (uploaded files, vote payloads) and headers.
Static file hits under the uploads prefix and /health are skipped; they
would drown out API traffic.
"""

import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from hotornot.config import settings
from hotornot.middleware.request_id import request_id_var

logger = logging.getLogger("hotornot.access")


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def _image_id(request: Request) -> Optional[str]:
    value = request.scope.get("path_params", {}).get("image_id")
    return None if value is None else str(value)


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    def _skip(self, path: str) -> bool:
        return path == "/health" or path.startswith(settings.uploads_url_prefix + "/")

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if self._skip(request.url.path):
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        route = _route_template(request)
        image_id = _image_id(request)
        rid = request_id_var.get("")

        logger.log(
            level_for_status(response.status_code),
            "%s %s%s %d %.1fms [%s]",
            request.method,
            route,
            f" image={image_id}" if image_id else "",
            response.status_code,
            elapsed_ms,
            rid,
            extra={
                "request_id": rid,
                "route": route,
                "image_id": image_id,
                "status": response.status_code,
                "duration_ms": elapsed_ms,
            },
        )
        return response
