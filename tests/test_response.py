"""Tests for warble.http.response — Response and ResponseWriter."""

import pytest

from warble.http.response import Response, ResponseWriter


class TestResponse:
    def test_defaults(self) -> None:
        response = Response()

        assert response.status == 200
        assert response.body == ""
        assert response.content_type == "text/html; charset=utf-8"
        assert response.headers == ()

    def test_with_chain(self) -> None:
        original = Response("hi")
        derived = (
            original.with_status(201)
            .with_header("X-A", "1")
            .with_headers({"X-B": "2"})
            .with_content_type("text/plain")
        )

        assert original.status == 200
        assert derived.status == 201
        assert derived.headers == (("X-A", "1"), ("X-B", "2"))
        assert derived.content_type == "text/plain"

    def test_header_lookup(self) -> None:
        response = Response(headers=(("Location", "/login"),))

        assert response.header("location") == "/login"
        assert response.header("content-type") == "text/html; charset=utf-8"
        assert response.header("x-missing") is None

    def test_body_conversions(self) -> None:
        assert Response("é").body_bytes == "é".encode()
        assert Response(b"raw").text == "raw"

    def test_is_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Response().status = 500  # type: ignore[misc]


class TestResponseWriter:
    def test_write_accumulates(self) -> None:
        res = ResponseWriter()

        assert res.write("User: ") == 6
        assert res.write(b"42") == 2
        assert res.body == b"User: 42"

    def test_is_empty(self) -> None:
        res = ResponseWriter()
        assert res.is_empty is True
        res.write("")
        assert res.is_empty is True
        res.write("x")
        assert res.is_empty is False

    def test_headers_case_insensitive(self) -> None:
        res = ResponseWriter()
        res["X-Token"] = "a"
        res.set_header("x-token", "b")

        assert res["X-TOKEN"] == "b"
        assert res.headers == (("x-token", "b"),)

    def test_content_type_slot(self) -> None:
        res = ResponseWriter()
        res["Content-Type"] = "application/json"

        assert res.content_type == "application/json"
        assert res.get_header("content-type") == "application/json"
        assert res.headers == ()

    def test_delete_header(self) -> None:
        res = ResponseWriter()
        res["X-A"] = "1"
        res.delete_header("x-a")
        res.delete_header("x-missing")

        assert res.get_header("X-A") is None
        assert res.get_header("X-A", "gone") == "gone"

    def test_redirect(self) -> None:
        res = ResponseWriter()
        res.redirect("/login")

        assert res.status == 302
        assert res["Location"] == "/login"

    def test_finish(self) -> None:
        res = ResponseWriter(status=201, content_type="text/plain")
        res["X-A"] = "1"
        res.write("done")

        response = res.finish()

        assert response == Response(
            body=b"done", status=201, content_type="text/plain", headers=(("X-A", "1"),)
        )

    def test_repr(self) -> None:
        res = ResponseWriter()
        res.write("abc")
        assert repr(res) == "<ResponseWriter 200 3 bytes>"
