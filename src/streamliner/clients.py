"""HTTP fetcher and authenticated API clients for GitHub and GitLab."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from streamliner.config import Config

logger = logging.getLogger(__name__)


class HttpFetcher:
    """Plain GET of a single URL."""

    def __init__(self, config: Config, transport: httpx.BaseTransport | None = None) -> None:
        self._config = config
        self._transport = transport

    def get(self, url: str) -> httpx.Response:
        """Fetch ``url``. Raises httpx.HTTPError on network failure or non-2xx."""
        with httpx.Client(
            headers={"User-Agent": self._config.http_user_agent},
            timeout=self._config.http_timeout_seconds,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            response = client.get(url)
            response.raise_for_status()
        return response


class _ApiClient:
    """JSON API client that follows ``Link: rel="next"`` pagination."""

    def __init__(
        self,
        config: Config,
        base_url: str,
        headers: dict[str, str],
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._base_url = base_url.rstrip("/")
        self._headers = {"User-Agent": config.http_user_agent, **headers}
        self._transport = transport

    def get_paginated(self, path: str) -> list[dict[str, Any]]:
        """Return every record of a collection endpoint, in page order.

        Stops after ``api_max_pages`` pages. Raises httpx.HTTPError on
        network failure or a non-2xx response.
        """
        records: list[dict[str, Any]] = []
        url: str | None = f"{self._base_url}{path}"
        params: dict[str, Any] | None = {"per_page": self._config.api_per_page}

        with httpx.Client(
            headers=self._headers,
            timeout=self._config.http_timeout_seconds,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            for _ in range(self._config.api_max_pages):
                response = client.get(url, params=params)
                response.raise_for_status()

                page = response.json()
                if not isinstance(page, list):
                    logger.warning("Expected a JSON array from %s, got %s", url, type(page).__name__)
                    return records
                records.extend(page)

                # The next link already carries the query string.
                url = response.links.get("next", {}).get("url")
                params = None
                if url is None:
                    return records

        logger.info("Stopped after %d pages of %s", self._config.api_max_pages, path)
        return records


class GitHubClient(_ApiClient):
    def __init__(self, config: Config, transport: httpx.BaseTransport | None = None) -> None:
        headers = {"Accept": "application/vnd.github+json"}
        if config.github_token:
            headers["Authorization"] = f"Bearer {config.github_token}"
        super().__init__(config, config.github_api_url, headers, transport)


class GitLabClient(_ApiClient):
    def __init__(self, config: Config, transport: httpx.BaseTransport | None = None) -> None:
        headers: dict[str, str] = {}
        if config.gitlab_token:
            headers["PRIVATE-TOKEN"] = config.gitlab_token
        super().__init__(config, config.gitlab_api_url, headers, transport)
