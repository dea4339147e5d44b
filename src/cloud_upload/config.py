"""Centralised configuration via Pydantic Settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Upload parameters loaded from environment variables."""

    model_config = {"env_prefix": "CLOUD_UPLOAD_", "frozen": True}

    # Remote service
    api_key: str = ""
    api_url: str = "https://api.mobile.dev"
    # Selects the project backend when set; the cloud backend otherwise.
    project_id: str = ""
    request_timeout_seconds: int = 60

    # Upload contents
    name: str = ""
    app_file: str = ""
    app_binary_id: str = ""
    mapping_file: str = ""
    workspace: str = ""

    # Run options
    # Format: one KEY=VALUE pair per line
    env: str = ""
    # Format: "tag1, tag2"
    include_tags: str = ""
    exclude_tags: str = ""
    android_api_level: int | None = None
    ios_version: int | None = None
    device_locale: str = ""

    # Polling
    # Upload and exit without waiting for results.
    async_mode: bool = False
    timeout_minutes: float = 30
    poll_interval_seconds: float = 10
    max_poll_interval_seconds: float = 300
    max_server_error_retries: int = 3


class GitHubContext(BaseSettings):
    """Workflow context exported by the GitHub Actions runner."""

    model_config = {"env_prefix": "GITHUB_", "frozen": True}

    ref: str = ""
    head_ref: str = ""
    sha: str = ""
    repository: str = ""
    event_name: str = ""
    event_path: str = ""
    workspace: str = ""


def get_settings() -> Settings:
    """Factory — allows overriding in tests."""
    return Settings()


def get_github_context() -> GitHubContext:
    return GitHubContext()
