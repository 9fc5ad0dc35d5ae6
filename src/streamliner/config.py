"""Configuration loading and validation."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from streamliner import __version__


@dataclass(frozen=True)
class Config:
    """Application configuration. All values sourced from environment variables."""

    # GitHub
    github_token: str | None = None
    github_api_url: str = "https://api.github.com"

    # GitLab
    gitlab_token: str | None = None
    gitlab_api_url: str = "https://gitlab.com/api/v4"

    # HTTP
    http_timeout_seconds: int = 30
    http_user_agent: str = f"streamliner/{__version__}"
    api_per_page: int = 100
    api_max_pages: int = 10

    # Application
    log_level: str = "INFO"
    log_format: str = "json"


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_config(env_path: str | Path | None = None) -> Config:
    """Load configuration from environment variables.

    Loads a .env file if present (for local development). Every variable is
    optional; unauthenticated clients work against public projects.
    Raises ValueError if a numeric variable is not an integer.
    """
    load_dotenv(dotenv_path=env_path)

    return Config(
        # GitHub
        github_token=os.environ.get("GITHUB_TOKEN") or None,
        github_api_url=os.environ.get("GITHUB_API_URL", "https://api.github.com"),
        # GitLab
        gitlab_token=os.environ.get("GITLAB_TOKEN") or None,
        gitlab_api_url=os.environ.get("GITLAB_API_URL", "https://gitlab.com/api/v4"),
        # HTTP
        http_timeout_seconds=_int_env("HTTP_TIMEOUT_SECONDS", 30),
        http_user_agent=os.environ.get("HTTP_USER_AGENT", f"streamliner/{__version__}"),
        api_per_page=_int_env("API_PER_PAGE", 100),
        api_max_pages=_int_env("API_MAX_PAGES", 10),
        # Application
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        log_format=os.environ.get("LOG_FORMAT", "json"),
    )
