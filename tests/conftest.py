"""Shared pytest fixtures for the cloud-upload test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from cloud_upload.config import GitHubContext, Settings
from cloud_upload.shared.enums import BackendTarget
from cloud_upload.shared.models import UploadJob


@pytest.fixture()
def settings() -> Settings:
    """Return a Settings instance with test defaults."""
    return Settings(
        api_key="test-key",
        api_url="http://api.test",
        app_binary_id="bin-1",
        poll_interval_seconds=0,
        timeout_minutes=1,
    )


@pytest.fixture()
def github(tmp_path) -> GitHubContext:
    return GitHubContext(
        ref="refs/heads/main",
        sha="abc123",
        repository="acme/app",
        event_name="push",
        event_path="",
        workspace=str(tmp_path),
    )


@pytest.fixture()
def cloud_job() -> UploadJob:
    return UploadJob(
        upload_id="upload-1",
        console_url="https://console.mobile.dev/uploads/upload-1?teamId=team-1&appId=bin-1",
        target=BackendTarget.CLOUD,
        app_binary_id="bin-1",
    )


@pytest.fixture()
def project_job() -> UploadJob:
    return UploadJob(
        upload_id="upload-1",
        console_url="https://copilot.mobile.dev/project/proj-1/maestro-test/app/app-1/upload/upload-1",
        target=BackendTarget.PROJECT,
        app_binary_id="bin-1",
    )


@pytest.fixture()
def mock_console() -> MagicMock:
    """Console double recording every printed line per presentation class."""
    return MagicMock()


@pytest.fixture()
def mock_outputs() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def mock_gateway() -> AsyncMock:
    gateway = AsyncMock()
    gateway.target = BackendTarget.CLOUD
    return gateway
