"""GitHub source adapter: issues and releases of one repository."""

from __future__ import annotations

import logging
from urllib.parse import quote, urlparse

from streamliner.clients import GitHubClient
from streamliner.config import Config
from streamliner.ingestion.adapter import PaginatedClient, SourceAdapter
from streamliner.ingestion.item import FieldExtractors, Item, Source, build_item

logger = logging.getLogger(__name__)

_ISSUE_FIELDS: FieldExtractors[dict] = FieldExtractors(
    url=lambda r: r.get("html_url"),
    title=lambda r: r.get("title"),
    body=lambda r: r.get("body"),
    timestamp=lambda r: r.get("created_at"),
)

_RELEASE_FIELDS: FieldExtractors[dict] = FieldExtractors(
    url=lambda r: r.get("html_url"),
    title=lambda r: r.get("name") or r.get("tag_name"),
    body=lambda r: r.get("body"),
    timestamp=lambda r: r.get("published_at") or r.get("created_at"),
    title_default="Release",
)


def parse_github_repo(url: str) -> tuple[str, str] | None:
    """Return ``(owner, repo)`` from a repository URL, or None if too short."""
    segments = [s for s in urlparse(url).path.split("/") if s]
    if len(segments) < 2:
        return None
    owner, repo = segments[0], segments[1]
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not repo:
        return None
    return owner, repo


def is_pull_request(record: dict) -> bool:
    """The issues endpoint also lists PRs; they carry a ``pull_request`` link."""
    return bool(record.get("pull_request"))


def map_issue(record: dict) -> Item:
    return build_item(Source.GITHUB_ISSUE, record, _ISSUE_FIELDS)


def map_release(record: dict) -> Item:
    return build_item(Source.GITHUB_RELEASE, record, _RELEASE_FIELDS)


class GitHubAdapter(SourceAdapter):
    """Adapter for GitHub repository issues and releases."""

    def __init__(self, client: PaginatedClient) -> None:
        self._client = client

    @property
    def name(self) -> str:
        return "github"

    @classmethod
    def from_config(cls, config: Config) -> GitHubAdapter:
        return cls(GitHubClient(config))

    def fetch(self, url: str) -> list[Item]:
        repo = parse_github_repo(url)
        if repo is None:
            logger.debug("No owner/repo in %s", url)
            return []

        base = "/repos/{}/{}".format(*(quote(part, safe="") for part in repo))
        issues = self._client.get_paginated(f"{base}/issues")
        releases = self._client.get_paginated(f"{base}/releases")

        items: list[Item] = []
        for record in issues:
            if is_pull_request(record):
                logger.debug("Skipping pull request %s", record.get("html_url"))
                continue
            items.append(map_issue(record))
        items.extend(map_release(record) for record in releases)

        logger.info("Fetched %d items from GitHub %s/%s", len(items), *repo)
        return items
