"""Warble — nested, first-match-wins HTTP request matching.

No route table. A handler body runs for every request and tries nested
conditions in program order; each successful path condition consumes
part of the request path, and the first attempt whose conditions all
pass handles the request.

Basic usage::

    from warble import App, default, get, number, path

    @App
    def app(c):
        @c.on(get, path("user"), number)
        def user(uid):
            c.res.write(f"User: {uid}")

        @c.on(default)
        def fallback():
            c.res.write("Nothing here")

``app`` is an ASGI application; ``app.dispatch(request)`` runs it
synchronously.
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "Context",
    "DelegationError",
    "HTTPError",
    "Request",
    "Response",
    "ResponseWriter",
    "WarbleError",
    "accept",
    "default",
    "delete",
    "extension",
    "get",
    "get_context",
    "get_request",
    "head",
    "header",
    "host",
    "number",
    "on",
    "options",
    "param",
    "patch",
    "path",
    "post",
    "put",
    "redirect",
    "run",
    "segment",
]

_PREDICATES = frozenset(
    {
        "accept",
        "default",
        "delete",
        "extension",
        "get",
        "head",
        "header",
        "host",
        "number",
        "options",
        "param",
        "patch",
        "path",
        "post",
        "put",
        "segment",
    }
)


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import warble`` fast while providing a clean top-level API.
    """
    if name == "App":
        from warble.app import App

        return App

    if name == "AppConfig":
        from warble.config import AppConfig

        return AppConfig

    if name == "Request":
        from warble.http.request import Request

        return Request

    if name in ("Response", "ResponseWriter"):
        from warble.http import response as _resp

        return getattr(_resp, name)

    if name in _PREDICATES:
        from warble.routing import predicates as _predicates

        return getattr(_predicates, name)

    if name in ("Context", "get_context", "get_request", "on", "redirect", "run"):
        from warble import context as _ctx

        return getattr(_ctx, name)

    if name in ("ConfigurationError", "DelegationError", "HTTPError", "WarbleError"):
        from warble import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
