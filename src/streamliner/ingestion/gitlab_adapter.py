"""GitLab source adapter: issues and merge requests of one project."""

from __future__ import annotations

import logging
from urllib.parse import quote, urlparse

from streamliner.clients import GitLabClient
from streamliner.config import Config
from streamliner.ingestion.adapter import PaginatedClient, SourceAdapter
from streamliner.ingestion.item import FieldExtractors, Item, Source, build_item

logger = logging.getLogger(__name__)

# Separates the project path from sub-pages, e.g. /group/project/-/issues
_SUBPAGE_MARKER = "-"

_FIELDS: FieldExtractors[dict] = FieldExtractors(
    url=lambda r: r.get("web_url"),
    title=lambda r: r.get("title"),
    body=lambda r: r.get("description"),
    timestamp=lambda r: r.get("created_at"),
)


def parse_gitlab_project(url: str) -> str | None:
    """Return the URL-encoded ``namespace/project`` path, or None if too short.

    Nested groups are kept, so ``/group/sub/project`` encodes all three
    segments.
    """
    segments: list[str] = []
    for segment in urlparse(url).path.split("/"):
        if segment == _SUBPAGE_MARKER:
            break
        if segment:
            segments.append(segment)
    if len(segments) < 2:
        return None
    if segments[-1].endswith(".git"):
        segments[-1] = segments[-1][: -len(".git")]
    return quote("/".join(segments), safe="")


def map_issue(record: dict) -> Item:
    return build_item(Source.GITLAB_ISSUE, record, _FIELDS)


def map_merge_request(record: dict) -> Item:
    return build_item(Source.GITLAB_MR, record, _FIELDS)


class GitLabAdapter(SourceAdapter):
    """Adapter for GitLab project issues and merge requests."""

    def __init__(self, client: PaginatedClient) -> None:
        self._client = client

    @property
    def name(self) -> str:
        return "gitlab"

    @classmethod
    def from_config(cls, config: Config) -> GitLabAdapter:
        return cls(GitLabClient(config))

    def fetch(self, url: str) -> list[Item]:
        project = parse_gitlab_project(url)
        if project is None:
            logger.debug("No namespace/project in %s", url)
            return []

        issues = self._client.get_paginated(f"/projects/{project}/issues")
        merge_requests = self._client.get_paginated(f"/projects/{project}/merge_requests")

        items = [map_issue(record) for record in issues]
        items.extend(map_merge_request(record) for record in merge_requests)

        logger.info("Fetched %d items from GitLab %s", len(items), project)
        return items
