"""Adapter registry: maps command tokens to adapter classes."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from streamliner.config import Config
    from streamliner.ingestion.adapter import SourceAdapter

_REGISTRY: dict[str, type[SourceAdapter]] = {}


def register_adapter(type_name: str, cls: type[SourceAdapter]) -> None:
    """Register an adapter class for a given command token."""
    _REGISTRY[type_name] = cls


def get_adapter_class(type_name: str) -> type[SourceAdapter] | None:
    """Look up an adapter class by command token. Returns None if not found."""
    return _REGISTRY.get(type_name)


def registered_types() -> list[str]:
    """Return a sorted list of all registered command tokens."""
    return sorted(_REGISTRY)


def create_adapter(type_name: str, config: Config) -> SourceAdapter:
    """Instantiate the adapter registered under ``type_name``.

    Raises KeyError for an unregistered token.
    """
    return _REGISTRY[type_name].from_config(config)
