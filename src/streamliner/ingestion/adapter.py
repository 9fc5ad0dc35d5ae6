"""Source adapter interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Protocol

import httpx

from streamliner.config import Config
from streamliner.ingestion.item import Item


class PaginatedClient(Protocol):
    """Authenticated API client returning every record of a collection."""

    def get_paginated(self, path: str) -> list[dict[str, Any]]: ...


class Fetcher(Protocol):
    """Single-URL HTTP GET."""

    def get(self, url: str) -> httpx.Response: ...


class SourceAdapter(ABC):
    """Abstract base class for source adapters.

    Every adapter knows how to fetch one source's native records and map
    them into Items. The rest of the system is source-agnostic.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Command token the adapter is registered under."""

    @classmethod
    @abstractmethod
    def from_config(cls, config: Config) -> SourceAdapter:
        """Build the adapter with its real network collaborator."""

    @abstractmethod
    def fetch(self, url: str) -> list[Item]:
        """Fetch ``url`` and return its items in upstream order.

        Missing optional input (fields, path segments, entries) yields
        defaults or an empty list, never an exception.
        """
