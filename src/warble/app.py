"""Warble application — the dispatch root.

An ``App`` pairs a handler body with a frozen ``AppConfig``. Both are
immutable, so one ``App`` serves any number of concurrent requests: all
matching state lives in the ``Context`` each dispatch creates.

Basic usage::

    from warble import App, number, path

    @App
    def app(c):
        @c.on(path("user"), number)
        def user(uid):
            c.res.write(f"User: {uid}")

``app.dispatch(request)`` runs the body synchronously and returns a
``Response``; ``app`` itself is an ASGI 3 application.
"""

import logging
from typing import Any

from warble._internal.asgi import Receive, Scope, Send
from warble._internal.types import Body
from warble.config import AppConfig
from warble.context import Context, context_var
from warble.errors import ConfigurationError, DelegationError
from warble.http.request import Request
from warble.http.response import Response, ResponseWriter
from warble.routing.delegation import Delegation, Successor
from warble.server.negotiation import negotiate

logger = logging.getLogger("warble.dispatch")


class App:
    """A handler body plus its configuration.

    The body is called with a fresh ``Context`` for every request and
    composes nested ``ctx.on(...)`` attempts. After it returns, a request
    nothing matched and nothing was written to becomes a 404.
    """

    __slots__ = ("body", "config")

    def __init__(self, body: Body, config: AppConfig | None = None) -> None:
        if not callable(body):
            msg = f"App body must be callable, got {type(body).__name__}"
            raise ConfigurationError(msg)
        self.body = body
        self.config: AppConfig = config or AppConfig()

    def __setattr__(self, name: str, value: Any) -> None:
        if hasattr(self, name):
            msg = f"App.{name} is read-only once the app is built"
            raise AttributeError(msg)
        object.__setattr__(self, name, value)

    def __repr__(self) -> str:
        name = getattr(self.body, "__qualname__", repr(self.body))
        return f"<App {name}>"

    # -- Dispatch root --

    def dispatch(self, request: Request) -> Response:
        """Run the body against *request* and return the finished response.

        A delegation escape raised anywhere inside the body discards
        everything written so far and returns the successor's response
        for the same request instead. Handler errors propagate.
        """
        return self._dispatch(request, hops=0)

    def _dispatch(self, request: Request, hops: int) -> Response:
        ctx = Context(
            self,
            request,
            ResponseWriter(
                status=self.config.default_status,
                content_type=self.config.default_content_type,
            ),
        )
        token = context_var.set(ctx)
        try:
            self.body(ctx)
        except Delegation as escape:
            if escape.owner is not ctx:
                raise
            successor = escape.successor
        else:
            if not ctx.matched and ctx.res.is_empty:
                logger.debug("no match for %s %s", request.method, request.url)
                ctx.res.status = self.config.not_found_status
            return ctx.res.finish()
        finally:
            context_var.reset(token)

        return self._delegate(successor, request, hops + 1)

    def _delegate(self, successor: Successor, request: Request, hops: int) -> Response:
        if hops > self.config.max_delegations:
            msg = (
                f"Delegation chain for {request.method} {request.url} exceeded "
                f"max_delegations={self.config.max_delegations}"
            )
            raise DelegationError(msg)

        logger.debug("%s %s delegated to %r", request.method, request.url, successor)
        if isinstance(successor, App):
            return successor._dispatch(request, hops)
        return negotiate(successor(request), config=self.config)

    # -- ASGI entry --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3 entry point."""
        from warble.server.handler import handle_lifespan, handle_request

        if scope["type"] == "lifespan":
            await handle_lifespan(receive, send)
            return
        await handle_request(scope, receive, send, app=self)
