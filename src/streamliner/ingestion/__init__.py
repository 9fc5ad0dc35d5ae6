"""Ingestion: provider adapters, feed detection, and the item model."""

from streamliner.ingestion.github_adapter import GitHubAdapter
from streamliner.ingestion.gitlab_adapter import GitLabAdapter
from streamliner.ingestion.http_adapter import HTTPAdapter
from streamliner.ingestion.registry import register_adapter
from streamliner.ingestion.rss_adapter import RSSAdapter

register_adapter("github", GitHubAdapter)
register_adapter("gitlab", GitLabAdapter)
register_adapter("rss", RSSAdapter)
register_adapter("http", HTTPAdapter)
