"""Tests for the top-level warble namespace — lazy public API."""

import pytest

import warble


class TestPublicAPI:
    @pytest.mark.parametrize("name", warble.__all__)
    def test_every_name_resolves(self, name: str) -> None:
        assert getattr(warble, name) is not None

    def test_names_are_the_real_objects(self) -> None:
        from warble.app import App
        from warble.context import on, redirect
        from warble.routing.predicates import number

        assert warble.App is App
        assert warble.redirect is redirect
        assert warble.on is on
        assert warble.number is number

    def test_unknown_name(self) -> None:
        with pytest.raises(AttributeError, match="no attribute 'nope'"):
            warble.nope  # noqa: B018

    def test_version(self) -> None:
        assert warble.__version__ == "0.1.0"
