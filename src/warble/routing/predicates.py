"""Predicates — the conditions ``on()`` evaluates.

Every condition is one of a closed set of frozen variants sharing a
single ``evaluate(ctx) -> bool`` method. ``on()`` normalises its
arguments with ``coerce``: booleans become ``Literal``, plain callables
become ``Check``, predicates pass through.

The lowercase names at the bottom are what handler bodies use::

    @c.on(get, path("user"), number)
    def show(uid):
        c.res.write(f"User: {uid}")

    @c.on(path("styles"), extension("css"))
    def stylesheet(name):
        ...

    @c.on(host("api.example.com"), accept("application/json"))
    def api():
        ...
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from warble.context import Context


@runtime_checkable
class Predicate(Protocol):
    """A deferred check against the current dispatch context.

    Implementations may consume path segments and push captures as a
    side effect; ``on()`` rolls the path back afterwards.
    """

    def evaluate(self, ctx: "Context", /) -> bool: ...


@dataclass(frozen=True, slots=True)
class Literal:
    """A fixed outcome — ``True`` passes, ``False`` aborts."""

    value: bool

    def evaluate(self, ctx: "Context", /) -> bool:
        return self.value


@dataclass(frozen=True, slots=True)
class PathMatcher:
    """Consume leading path segment(s) matching a regex fragment.

    Groups inside *pattern* become captures, in order.
    """

    pattern: str

    def evaluate(self, ctx: "Context", /) -> bool:
        return ctx.cursor.consume(self.pattern, ctx.captures)


@dataclass(frozen=True, slots=True)
class ParamChecker:
    """Capture a request parameter (or *default*). Always succeeds.

    Use a default of ``None`` and test the captured value in the handler
    when the parameter is required.
    """

    key: str
    default: str | None = None

    def evaluate(self, ctx: "Context", /) -> bool:
        ctx.captures.append(ctx.req.param(self.key, self.default))
        return True


@dataclass(frozen=True, slots=True)
class HeaderChecker:
    """Succeed when the header is present (or a *default* is given).

    Nothing is captured.
    """

    key: str
    default: str | None = None

    def evaluate(self, ctx: "Context", /) -> bool:
        return ctx.req.header(self.key, self.default) is not None


@dataclass(frozen=True, slots=True)
class HostChecker:
    """Compare the request host by equality, or search it with a pattern."""

    hostname: str | re.Pattern[str]

    def evaluate(self, ctx: "Context", /) -> bool:
        if isinstance(self.hostname, re.Pattern):
            return self.hostname.search(ctx.req.host) is not None
        return ctx.req.host == self.hostname


@dataclass(frozen=True, slots=True)
class AcceptChecker:
    """Succeed when any Accept header line lists *mimetype*.

    On success the response Content-Type is set to *mimetype*. The header
    is left in place even if a later condition of the same attempt fails.
    """

    mimetype: str

    def evaluate(self, ctx: "Context", /) -> bool:
        # Repeated Accept lines form one comma-separated list
        accepted = (
            item.strip()
            for line in ctx.req.headers.get_list("accept")
            for item in line.split(",")
        )
        if self.mimetype not in accepted:
            return False
        ctx.res.set_header("Content-Type", self.mimetype)
        return True


@dataclass(frozen=True, slots=True)
class VerbChecker:
    """Match the request method."""

    method: str

    def evaluate(self, ctx: "Context", /) -> bool:
        return ctx.req.method == self.method


@dataclass(frozen=True, slots=True)
class Check:
    """Wrap a zero-argument callable; its result's truthiness decides."""

    func: Callable[[], Any]

    def evaluate(self, ctx: "Context", /) -> bool:
        return bool(self.func())


def coerce(condition: object) -> Predicate:
    """Normalise one ``on()`` argument into a predicate variant."""
    if isinstance(condition, bool):
        return TRUE if condition else FALSE
    if isinstance(condition, Predicate):
        return condition
    if callable(condition):
        return Check(condition)
    msg = (
        f"on() conditions must be bool, a predicate or a zero-argument callable, "
        f"got {type(condition).__name__}"
    )
    raise TypeError(msg)


TRUE = Literal(True)
FALSE = Literal(False)


# -- Public factories --


def path(pattern: str) -> PathMatcher:
    """Match one or more leading path segments.

    ``path("signup")`` matches ``/signup``; ``path(r"user(\\d+)")``
    matches ``/user123`` and captures ``"123"``; ``path("user")`` followed
    by ``number`` matches ``/user/1``.
    """
    return PathMatcher(pattern)


segment = PathMatcher(r"([^/]+)")
"""Any single segment, captured. Useful for slugs."""

number = PathMatcher(r"(\d+)")
"""A numeric segment, captured as a string."""


def extension(ext: str = r"\w+") -> PathMatcher:
    """Match a final segment ending in ``.ext``; captures the stem.

    ``/style/app.css`` with ``path("style"), extension("css")`` captures
    ``"app"``. *ext* is a regex fragment.
    """
    return PathMatcher(rf"([^/]+?)\.{ext}\Z")


def param(key: str, default: str | None = None) -> ParamChecker:
    """Capture request parameter *key* (form field or query string)."""
    return ParamChecker(key, default)


def header(key: str, default: str | None = None) -> HeaderChecker:
    """Require header *key*; accepts ``X-Api-Key`` or ``HTTP_X_API_KEY``."""
    return HeaderChecker(key, default)


def host(hostname: str | re.Pattern[str]) -> HostChecker:
    """Match the request host (port stripped)."""
    return HostChecker(hostname)


def accept(mimetype: str) -> AcceptChecker:
    """Match an Accept header entry and answer with that content type."""
    return AcceptChecker(mimetype)


default = TRUE
"""Always passes. Use for catch-all branches."""

get = VerbChecker("GET")
post = VerbChecker("POST")
put = VerbChecker("PUT")
delete = VerbChecker("DELETE")
head = VerbChecker("HEAD")
patch = VerbChecker("PATCH")
options = VerbChecker("OPTIONS")
