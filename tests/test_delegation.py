"""Tests for delegation — run(), redirect() and the chain limit."""

import pytest

from warble.app import App
from warble.config import AppConfig
from warble.context import Context, redirect, run
from warble.errors import DelegationError
from warble.http.request import Request
from warble.http.response import Response
from warble.routing.delegation import Delegation
from warble.routing.predicates import default, get, number, path
from warble.testing import build_request


@App
def fallback(c: Context) -> None:
    @c.on(path("user"), number)
    def user(uid: str) -> None:
        c.res.write(f"Fallback user {uid}")

    @c.on(default)
    def other() -> None:
        c.res.write(f"Fallback at {c.cursor.remaining}")


class TestRun:
    def test_discards_partial_output_from_nested_levels(self) -> None:
        @App
        def app(c: Context) -> None:
            c.res.write("outer ")
            c.res.status = 500
            c.res["X-Partial"] = "yes"

            @c.on(path("a"))
            def a() -> None:
                c.res.write("a ")

                @c.on(path("b"))
                def b() -> None:
                    c.res.write("b ")

                    @c.on(path("c"))
                    def c_() -> None:
                        c.res.write("c ")
                        c.run(fallback)

        response = app.dispatch(build_request("/a/b/c"))

        assert response.status == 200
        assert response.text == "Fallback at /a/b/c"
        assert response.header("X-Partial") is None

    def test_successor_sees_the_original_path(self) -> None:
        @App
        def app(c: Context) -> None:
            @c.on(path("user"))
            def user() -> None:
                c.run(fallback)

        assert app.dispatch(build_request("/user/7")).text == "Fallback user 7"

    def test_code_after_run_does_not_execute(self) -> None:
        calls: list[str] = []

        @App
        def app(c: Context) -> None:
            @c.on(default)
            def handler() -> None:
                c.run(fallback)
                calls.append("after")

            calls.append("body end")

        app.dispatch(build_request("/"))
        assert calls == []

    def test_except_exception_does_not_swallow_escape(self) -> None:
        @App
        def app(c: Context) -> None:
            @c.on(default)
            def handler() -> None:
                try:
                    c.run(fallback)
                except Exception:
                    c.res.write("swallowed")

        assert app.dispatch(build_request("/x")).text == "Fallback at /x"

    def test_module_level_run(self) -> None:
        @App
        def app(c: Context) -> None:
            c.on(default, handler=lambda: run(fallback))

        assert app.dispatch(build_request("/x")).text == "Fallback at /x"

    def test_second_run_is_an_error(self) -> None:
        @App
        def app(c: Context) -> None:
            @c.on(default)
            def handler() -> None:
                try:
                    c.run(fallback)
                except Delegation:
                    c.run(fallback)

        with pytest.raises(DelegationError, match="single-shot"):
            app.dispatch(build_request("/"))

    def test_run_outside_dispatch(self) -> None:
        with pytest.raises(DelegationError, match="outside a dispatch"):
            run(fallback)


class TestCallableSuccessor:
    def test_string_result(self) -> None:
        def legacy(request: Request) -> str:
            return f"legacy {request.path}"

        @App
        def app(c: Context) -> None:
            c.on(default, handler=lambda: c.run(legacy))

        response = app.dispatch(build_request("/old"))

        assert response.status == 200
        assert response.text == "legacy /old"

    def test_response_result(self) -> None:
        @App
        def app(c: Context) -> None:
            c.on(default, handler=lambda: c.run(lambda r: Response("teapot", status=418)))

        assert app.dispatch(build_request("/")).status == 418

    def test_tuple_result(self) -> None:
        @App
        def app(c: Context) -> None:
            c.on(default, handler=lambda: c.run(lambda r: ({"ok": True}, 202)))

        response = app.dispatch(build_request("/"))

        assert response.status == 202
        assert response.content_type == "application/json; charset=utf-8"
        assert response.text == '{"ok": true}'

    def test_none_result_is_not_found(self) -> None:
        @App
        def app(c: Context) -> None:
            c.on(default, handler=lambda: c.run(lambda r: None))

        assert app.dispatch(build_request("/")).status == 404


class TestChain:
    def test_successor_may_delegate_again(self) -> None:
        @App
        def middle(c: Context) -> None:
            c.on(default, handler=lambda: c.run(fallback))

        @App
        def app(c: Context) -> None:
            c.on(default, handler=lambda: c.run(middle))

        assert app.dispatch(build_request("/x")).text == "Fallback at /x"

    def test_loop_is_bounded(self) -> None:
        config = AppConfig(max_delegations=3)

        def loop(c: Context) -> None:
            c.on(default, handler=lambda: c.run(app))

        app = App(loop, config=config)

        with pytest.raises(DelegationError, match="max_delegations=3"):
            app.dispatch(build_request("/"))

    def test_zero_disables_delegation(self) -> None:
        app = App(
            lambda c: c.on(default, handler=lambda: c.run(fallback)),
            config=AppConfig(max_delegations=0),
        )

        with pytest.raises(DelegationError):
            app.dispatch(build_request("/"))


class TestRedirect:
    def test_redirect(self) -> None:
        @App
        def app(c: Context) -> None:
            @c.on(get, path("account"))
            def account() -> None:
                c.res.write("partial")
                if c.req.header("authorization") is None:
                    redirect("/login")
                c.res.write("Super secure account info.")

        response = app.dispatch(build_request("/account"))

        assert response.status == 302
        assert response.header("Location") == "/login"
        assert response.body_bytes == b""

    def test_redirect_status(self) -> None:
        @App
        def app(c: Context) -> None:
            c.on(default, handler=lambda: redirect("/new", status=301))

        response = app.dispatch(build_request("/old"))

        assert response.status == 301
        assert response.header("Location") == "/new"

    def test_authorized_request_is_not_redirected(self) -> None:
        @App
        def app(c: Context) -> None:
            @c.on(path("account"))
            def account() -> None:
                if c.req.header("authorization") is None:
                    redirect("/login")
                c.res.write("Super secure account info.")

        response = app.dispatch(
            build_request("/account", headers={"Authorization": "Bearer token"})
        )

        assert response.status == 200
        assert response.text == "Super secure account info."
