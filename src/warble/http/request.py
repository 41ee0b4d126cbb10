"""Immutable HTTP request.

Frozen metadata with async body access. The matching engine reads the
request but never mutates it: path consumption happens on the
per-dispatch ``PathCursor``, not on the request.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any

from warble._internal.asgi import Receive, Scope
from warble._internal.multimap import MultiValueMapping
from warble.errors import HTTPError
from warble.http.forms import FormData, is_form_content_type, parse_form_data
from warble.http.headers import Headers
from warble.http.query import QueryParams


async def _empty_receive() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is the part of the URL the app is asked to route and
    ``root_path`` the prefix it is mounted under (ASGI ``root_path``,
    CGI ``SCRIPT_NAME``). Together they seed each dispatch's path cursor.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query: QueryParams = field(default_factory=QueryParams)
    root_path: str = ""
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    # Private: ASGI receive callable for body streaming
    _receive: Receive = field(default=_empty_receive, repr=False, compare=False)

    # Private: mutable cache for body and parsed form data
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def host(self) -> str:
        """Host name without port, from ``Host`` or the server address."""
        value = self.headers.get("host")
        if not value:
            return self.server[0] if self.server else ""
        if value.startswith("["):
            # IPv6 literal: [::1]:8000
            return value[: value.find("]") + 1]
        return value.rsplit(":", 1)[0] if ":" in value else value

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @property
    def url(self) -> str:
        """Full request path including root path and query string."""
        path = f"{self.root_path}{self.path}"
        if self.query.raw:
            return f"{path}?{self.query.raw.decode('latin-1')}"
        return path

    @property
    def params(self) -> tuple[MultiValueMapping, ...]:
        """Parameter sources in lookup order: loaded form data, then query."""
        form = self._cache.get("_form")
        if form is None:
            return (self.query,)
        return (form, self.query)

    # -- Synchronous lookups used by predicates --

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return a header value by HTTP or CGI-style name."""
        return self.headers.get(name, default)

    def param(self, name: str, default: str | None = None) -> str | None:
        """Return a request parameter, form fields taking precedence.

        Form fields are only visible once the body has been loaded with
        ``load_form()``; the ASGI handler does this before dispatching.
        """
        for source in self.params:
            value = source.get(name)
            if value is not None:
                return value
        return default

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached — the ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes, None]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(await self.body())

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    async def form(self) -> FormData:
        """Parse the body as form data (URL-encoded or multipart).

        Result is cached. Raises ``ValueError`` if Content-Type is not a
        form encoding.
        """
        if "_form" in self._cache:
            return self._cache["_form"]
        ct = self.content_type or "application/x-www-form-urlencoded"
        result = parse_form_data(await self.body(), ct)
        self._cache["_form"] = result
        return result

    async def load_form(self, max_length: int) -> FormData | None:
        """Load a form body so ``param()`` can see its fields.

        Returns ``None`` without reading anything when the request is not
        form-encoded. Raises ``HTTPError(413)`` when the body is larger
        than *max_length* bytes and ``HTTPError(400)`` when it cannot be
        parsed.
        """
        if not is_form_content_type(self.content_type):
            return None
        declared = self.content_length
        if declared is not None and declared > max_length:
            raise HTTPError(413, "Request body too large")
        if "_body" not in self._cache:
            size = 0
            chunks: list[bytes] = []
            async for chunk in self.stream():
                size += len(chunk)
                if size > max_length:
                    raise HTTPError(413, "Request body too large")
                chunks.append(chunk)
            self._cache["_body"] = b"".join(chunks)
        try:
            return await self.form()
        except ValueError as exc:
            raise HTTPError(400, f"Malformed form body: {exc}") from exc

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        root_path = scope.get("root_path", "")
        path = scope["path"]
        # Servers disagree on whether path already includes root_path
        if root_path and (path == root_path or path.startswith(f"{root_path}/")):
            path = path[len(root_path) :]
        return cls(
            method=scope["method"].upper(),
            path=path,
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            root_path=root_path,
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )
