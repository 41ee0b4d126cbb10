"""Content negotiation — maps successor return values to Response objects.

A delegation successor that is not an ``App`` is a plain callable taking
the ``Request``. Whatever it returns is converted here. isinstance-based
dispatch, no magic, fully predictable.
"""

import json as json_module
from typing import Any

from warble.config import AppConfig
from warble.errors import ConfigurationError
from warble.http.response import Response, ResponseWriter


def negotiate(value: Any, *, config: AppConfig | None = None) -> Response:
    """Convert a successor's return value to a Response.

    Dispatch order:

    1. ``Response``            -> pass through
    2. ``ResponseWriter``      -> ``finish()``
    3. ``str``                 -> default status, default content type
    4. ``bytes``               -> default status, application/octet-stream
    5. ``dict`` / ``list``     -> default status, application/json
    6. ``None``                -> empty body, not-found status
    7. ``(value, int)``        -> negotiate value, override status
    8. ``(value, int, dict)``  -> negotiate value, override status + headers
    """
    cfg = config or AppConfig()
    match value:
        case Response():
            return value
        case ResponseWriter():
            return value.finish()
        case str():
            return Response(
                body=value,
                status=cfg.default_status,
                content_type=cfg.default_content_type,
            )
        case bytes():
            return Response(
                body=value,
                status=cfg.default_status,
                content_type="application/octet-stream",
            )
        case dict() | list():
            return Response(
                body=json_module.dumps(value, default=str),
                status=cfg.default_status,
                content_type="application/json; charset=utf-8",
            )
        case None:
            return Response(body="", status=cfg.not_found_status)
        case (inner, int() as status):
            return negotiate(inner, config=cfg).with_status(status)
        case (inner, int() as status, dict() as headers):
            return negotiate(inner, config=cfg).with_status(status).with_headers(headers)
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                f"Return str, bytes, dict, list, Response or ResponseWriter."
            )
            raise ConfigurationError(msg)
