"""Error responses for the ASGI layer.

The matching engine never turns exceptions into responses; this module
does, for requests that arrived through ``App.__call__``.
"""

import logging
import traceback

from warble.config import AppConfig
from warble.errors import HTTPError
from warble.http.request import Request
from warble.http.response import Response

logger = logging.getLogger("warble.server")


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError raised by a handler to its response."""
    logger.debug("%d %s %s — %s", exc.status, request.method, request.url, exc.detail)

    body = exc.detail or f"Error {exc.status}"
    resp = Response(body=body, status=exc.status, content_type="text/plain; charset=utf-8")
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def handle_internal_error(exc: Exception, request: Request, config: AppConfig) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.url)

    if config.debug:
        body = "".join(traceback.format_exception(exc))
        return Response(body=body, status=500, content_type="text/plain; charset=utf-8")

    return Response(
        body="Internal Server Error",
        status=500,
        content_type="text/plain; charset=utf-8",
    )
