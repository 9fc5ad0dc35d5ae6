"""Command dispatch: route a command token and URL to its adapter."""

from __future__ import annotations

import logging
from typing import Callable

from streamliner.autodetect import classify
from streamliner.config import Config
from streamliner.ingestion import registry
from streamliner.ingestion.adapter import SourceAdapter
from streamliner.ingestion.item import ItemsResponse

logger = logging.getLogger(__name__)

AUTODETECT_COMMAND = "get"

AdapterFactory = Callable[[str], SourceAdapter]


class InvocationError(ValueError):
    """Unknown command token or missing URL; raised before any I/O."""


def commands() -> list[str]:
    """All accepted command tokens, including the autodetect alias."""
    return [*registry.registered_types(), AUTODETECT_COMMAND]


def dispatch(
    command: str,
    url: str | None,
    config: Config | None = None,
    factory: AdapterFactory | None = None,
) -> ItemsResponse:
    """Run ``command`` against ``url`` and wrap the items in a response.

    ``get`` classifies the URL and re-dispatches to the matching adapter.
    ``factory`` builds an adapter from a command token; by default the
    registered adapter is built from ``config``.

    Raises InvocationError for an unknown command or an empty URL. Upstream
    httpx errors propagate unchanged.
    """
    if command != AUTODETECT_COMMAND and registry.get_adapter_class(command) is None:
        raise InvocationError(
            f"Unknown command '{command}'; must be one of: {', '.join(commands())}"
        )
    if url is None or not url.strip():
        raise InvocationError(f"Command '{command}' requires a non-empty URL")
    url = url.strip()

    if factory is None:
        factory = _registry_factory(config if config is not None else Config())

    if command == AUTODETECT_COMMAND:
        command = classify(url).value
        logger.info("Autodetected provider '%s' for %s", command, url)

    return _route(command, url, factory)


def _registry_factory(config: Config) -> AdapterFactory:
    def build(name: str) -> SourceAdapter:
        return registry.create_adapter(name, config)

    return build


def _route(command: str, url: str, factory: AdapterFactory) -> ItemsResponse:
    adapter = factory(command)
    return ItemsResponse(items=adapter.fetch(url))
