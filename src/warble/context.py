"""Per-request dispatch context and the match engine.

A ``Context`` is created by ``App.dispatch`` for every request and holds
all mutable matching state: the path cursor, the capture list, the
matched flag and the response writer. The handler body receives it as
its only argument::

    def body(c):
        @c.on(path("doctors"))
        def doctors():
            @c.on(path("account"))
            def account():
                c.res.write("Settings page")

The current context is also bound to a ``ContextVar`` for the duration of
the dispatch so helpers can reach it without threading it through:
``get_context()``, ``get_request()``, ``run()``.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local in worker
    threads. Nothing here is shared between dispatches, so no locks.
"""

from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, NoReturn

from warble._internal.types import Handler
from warble.errors import DelegationError
from warble.http.request import Request
from warble.http.response import ResponseWriter
from warble.routing.cursor import PathCursor
from warble.routing.delegation import Delegation, Successor
from warble.routing.predicates import coerce

if TYPE_CHECKING:
    from warble.app import App


class Context:
    """Mutable matching state for exactly one dispatch."""

    __slots__ = ("_escaped", "app", "captures", "cursor", "matched", "req", "res")

    def __init__(self, app: "App", req: Request, res: ResponseWriter) -> None:
        self.app = app
        self.req = req
        self.res = res
        self.cursor = PathCursor(consumed=req.root_path, remaining=req.path)
        self.captures: list[str | None] = []
        self.matched = False
        self._escaped = False

    def on(self, *conditions: object, handler: Handler | None = None) -> Any:
        """Run one matching attempt.

        Conditions are evaluated left to right and the first failure
        abandons the attempt. When all pass, *handler* is called with the
        attempt's captures and the dispatch is marked as matched; every
        later ``on()`` in this request is then a no-op. The path cursor is
        restored when the attempt ends, however it ends.

        Without *handler*, returns a decorator that runs the attempt with
        the decorated function immediately::

            @c.on(path("user"), number)
            def user(uid):
                c.res.write(f"User: {uid}")
        """
        if handler is None:

            def decorator(func: Handler) -> Handler:
                self._attempt(conditions, func)
                return func

            return decorator

        self._attempt(conditions, handler)
        return None

    def _attempt(self, conditions: tuple[object, ...], handler: Handler) -> None:
        if self.matched:
            return

        predicates = [coerce(condition) for condition in conditions]
        snapshot = self.cursor.snapshot()
        # Captures never leak between attempts, nested or sibling
        self.captures = []
        try:
            for predicate in predicates:
                if not predicate.evaluate(self):
                    return
            handler(*self.captures)
            self.matched = True
        finally:
            self.cursor.restore(snapshot)

    def run(self, successor: Successor) -> NoReturn:
        """Abandon this dispatch and hand the request to *successor*.

        *successor* is another ``App`` or any callable taking the
        ``Request``. Whatever this dispatch wrote is discarded. Raises
        ``DelegationError`` if this context has already delegated.
        """
        if self._escaped:
            msg = "This dispatch has already delegated; run() is single-shot"
            raise DelegationError(msg)
        self._escaped = True
        raise Delegation(self, successor)

    def __repr__(self) -> str:
        return (
            f"<Context {self.req.method} consumed={self.cursor.consumed!r} "
            f"remaining={self.cursor.remaining!r} matched={self.matched}>"
        )


# -- Current context --

context_var: ContextVar[Context] = ContextVar("warble_context")
"""The context of the dispatch running in this task/thread."""


def get_context() -> Context:
    """Return the current dispatch context.

    Raises ``LookupError`` if called outside a dispatch.
    """
    return context_var.get()


def get_request() -> Request:
    """Return the request of the current dispatch.

    Raises ``LookupError`` if called outside a dispatch.
    """
    return context_var.get().req


def on(*conditions: object, handler: Handler | None = None) -> Any:
    """``Context.on`` for the current dispatch."""
    return get_context().on(*conditions, handler=handler)


def _delegating_context() -> Context:
    try:
        return context_var.get()
    except LookupError:
        msg = "run() called outside a dispatch; there is no root to delegate from"
        raise DelegationError(msg) from None


def run(successor: Successor) -> NoReturn:
    """``Context.run`` for the current dispatch.

    Raises ``DelegationError`` outside a dispatch.
    """
    _delegating_context().run(successor)


def redirect(target: str, status: int = 302) -> NoReturn:
    """Delegate the current dispatch to a bare redirect response.

    Usage::

        @c.on(path("account"))
        def account():
            if c.req.header("authorization") is None:
                redirect("/login")
            c.res.write("Super secure account info.")
    """
    from warble.app import App

    def _redirect(ctx: Context) -> None:
        ctx.on(True, handler=lambda: ctx.res.redirect(target, status))

    ctx = _delegating_context()
    ctx.run(App(_redirect, config=ctx.app.config))

