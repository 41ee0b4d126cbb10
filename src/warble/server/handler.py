"""ASGI handler — translates ASGI scope/messages to warble types.

The only component that touches raw ASGI directly. Builds a ``Request``,
loads form bodies so ``param()`` can see them, runs the synchronous
dispatch and sends the resulting ``Response`` back through ``send()``.
"""

from typing import TYPE_CHECKING

import anyio.to_thread

from warble._internal.asgi import Receive, Scope, Send
from warble.errors import HTTPError
from warble.http.request import Request
from warble.http.response import Response
from warble.server.errors import handle_http_error, handle_internal_error
from warble.server.sender import send_response

if TYPE_CHECKING:
    from warble.app import App


async def handle_request(scope: Scope, receive: Receive, send: Send, *, app: "App") -> None:
    """Process a single HTTP request through the dispatch root."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    config = app.config

    try:
        await request.load_form(config.max_content_length)
        if config.threaded_dispatch:
            # Handler bodies are plain sync code and may block
            response: Response = await anyio.to_thread.run_sync(app.dispatch, request)
        else:
            response = app.dispatch(request)
    except HTTPError as exc:
        response = handle_http_error(exc, request)
    except Exception as exc:
        response = handle_internal_error(exc, request, config)

    await send_response(response, send, head=request.method == "HEAD")


async def handle_lifespan(receive: Receive, send: Send) -> None:
    """Acknowledge lifespan startup/shutdown; warble has no hooks to run."""
    while True:
        message = await receive()
        if message["type"] == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif message["type"] == "lifespan.shutdown":
            await send({"type": "lifespan.shutdown.complete"})
            return
