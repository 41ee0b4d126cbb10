"""Tests for warble.testing — build_request and TestClient plumbing."""

import pytest

from warble.app import App
from warble.context import Context
from warble.testing import TestClient, build_request


class TestBuildRequest:
    def test_defaults(self) -> None:
        request = build_request()

        assert request.method == "GET"
        assert request.path == "/"
        assert request.root_path == ""
        assert request.server == ("testserver", 80)

    def test_query_split_from_path(self) -> None:
        request = build_request("/search?q=owls&page=2")

        assert request.path == "/search"
        assert request.query["q"] == "owls"
        assert request.query.get_int("page") == 2

    def test_query_mapping(self) -> None:
        request = build_request("/search", query={"q": "snowy owls"})

        assert request.query["q"] == "snowy owls"

    def test_explicit_query_wins_over_suffix(self) -> None:
        request = build_request("/a?b=c", query="d=e")

        assert request.path == "/a?b=c"
        assert request.query.get("d") == "e"

    def test_method_is_uppercased(self) -> None:
        assert build_request(method="post").method == "POST"

    def test_headers(self) -> None:
        request = build_request(headers={"Accept": "text/html"})
        assert request.header("HTTP_ACCEPT") == "text/html"


class TestClientPlumbing:
    def test_not_collected_by_pytest(self) -> None:
        assert TestClient.__test__ is False

    @pytest.mark.asyncio
    async def test_json_post_body(self) -> None:
        @App
        def app(c: Context) -> None:
            c.on(True, handler=lambda: c.res.write(c.req.header("content-type") or ""))

        async with TestClient(app) as client:
            response = await client.post("/", json={"a": 1})

        assert response.text == "application/json"

    @pytest.mark.asyncio
    async def test_request_headers_are_sent(self) -> None:
        @App
        def app(c: Context) -> None:
            c.on(True, handler=lambda: c.res.write(c.req.header("x-token") or "none"))

        async with TestClient(app) as client:
            response = await client.get("/", headers={"X-Token": "abc"})

        assert response.text == "abc"
