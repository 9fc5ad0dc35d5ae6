"""Tests for streamliner.dispatch: command routing and invocation errors."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from streamliner.dispatch import InvocationError, commands, dispatch
from streamliner.ingestion.item import Item, ItemsResponse, Source


def _recording_factory(items=None):
    """Factory that records which command tokens it was asked to build."""
    built: list[str] = []
    adapter = MagicMock()
    adapter.fetch.return_value = items if items is not None else []

    def factory(name):
        built.append(name)
        return adapter

    return factory, built, adapter


class TestInvocationErrors:
    def test_unknown_command(self):
        factory, built, adapter = _recording_factory()
        with pytest.raises(InvocationError, match="Unknown command 'svn'"):
            dispatch("svn", "https://example.com", factory=factory)
        assert built == []
        adapter.fetch.assert_not_called()

    @pytest.mark.parametrize("url", [None, "", "   "])
    def test_empty_url(self, url):
        factory, built, adapter = _recording_factory()
        with pytest.raises(InvocationError, match="non-empty URL"):
            dispatch("rss", url, factory=factory)
        assert built == []

    def test_empty_url_for_get(self):
        factory, built, _ = _recording_factory()
        with pytest.raises(InvocationError):
            dispatch("get", "", factory=factory)
        assert built == []

    def test_is_value_error(self):
        assert issubclass(InvocationError, ValueError)

    def test_no_network_client_built_on_error(self):
        with patch("streamliner.dispatch.registry.create_adapter") as create:
            with pytest.raises(InvocationError):
                dispatch("bogus", "https://example.com")
        create.assert_not_called()


class TestExplicitRoutes:
    @pytest.mark.parametrize("command", ["github", "gitlab", "rss", "http"])
    def test_routes_to_named_adapter(self, command):
        factory, built, adapter = _recording_factory()
        dispatch(command, "https://example.com/feed.xml", factory=factory)
        assert built == [command]
        adapter.fetch.assert_called_once_with("https://example.com/feed.xml")

    def test_explicit_route_does_not_autodetect(self):
        factory, built, _ = _recording_factory()
        with patch("streamliner.dispatch.classify") as classify:
            dispatch("http", "https://github.com/acme/widget", factory=factory)
        classify.assert_not_called()
        assert built == ["http"]

    def test_wraps_items_in_envelope(self):
        items = [Item("https://x", "T", "C", False, Source.HTTP)]
        factory, _, _ = _recording_factory(items)
        response = dispatch("http", "https://x", factory=factory)
        assert isinstance(response, ItemsResponse)
        assert response.items == items

    def test_url_is_trimmed(self):
        factory, _, adapter = _recording_factory()
        dispatch("http", "  https://x  ", factory=factory)
        adapter.fetch.assert_called_once_with("https://x")


class TestAutodetectRoute:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://github.com/acme/widget", "github"),
            ("https://gitlab.com/acme/widget", "gitlab"),
            ("https://example.com/feed.xml", "rss"),
            ("https://example.com/about", "http"),
        ],
    )
    def test_get_redispatches(self, url, expected):
        factory, built, adapter = _recording_factory()
        dispatch("get", url, factory=factory)
        assert built == [expected]
        adapter.fetch.assert_called_once_with(url)


class TestDefaultFactory:
    def test_builds_registered_adapter_from_config(self):
        fake = MagicMock()
        fake.fetch.return_value = []
        with patch("streamliner.dispatch.registry.create_adapter", return_value=fake) as create:
            dispatch("gitlab", "https://gitlab.com/acme/widget")
        assert create.call_args.args[0] == "gitlab"


def test_commands_include_alias():
    assert commands() == ["github", "gitlab", "http", "rss", "get"]
