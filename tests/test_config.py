"""Tests for environment-driven configuration."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cloud_upload.config import GitHubContext, Settings, get_settings


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CLOUD_UPLOAD_API_URL", raising=False)
        settings = Settings()
        assert settings.api_url == "https://api.mobile.dev"
        assert settings.timeout_minutes == 30
        assert settings.poll_interval_seconds == 10
        assert settings.max_server_error_retries == 3
        assert settings.async_mode is False

    def test_reads_prefixed_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLOUD_UPLOAD_API_KEY", "secret")
        monkeypatch.setenv("CLOUD_UPLOAD_PROJECT_ID", "proj-1")
        monkeypatch.setenv("CLOUD_UPLOAD_ASYNC_MODE", "true")
        monkeypatch.setenv("CLOUD_UPLOAD_ANDROID_API_LEVEL", "34")

        settings = get_settings()

        assert settings.api_key == "secret"
        assert settings.project_id == "proj-1"
        assert settings.async_mode is True
        assert settings.android_api_level == 34

    def test_frozen(self) -> None:
        settings = Settings(api_key="k")
        with pytest.raises(ValidationError):
            settings.api_key = "other"  # type: ignore[misc]


class TestGitHubContext:
    def test_reads_runner_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_REF", "refs/heads/main")
        monkeypatch.setenv("GITHUB_REPOSITORY", "acme/app")

        github = GitHubContext()

        assert github.ref == "refs/heads/main"
        assert github.repository == "acme/app"
