"""Frozen Pydantic domain models shared by all modules."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from cloud_upload.shared.enums import BackendTarget, CancellationReason, FlowStatus, PollResult

# Wire format is camelCase; Python attributes stay snake_case.
_WIRE_CONFIG = {"frozen": True, "alias_generator": to_camel, "populate_by_name": True}

# Fields the project backend does not accept.
_PROJECT_EXCLUDED = {"name", "repo_owner", "repo_name", "agent"}

logger = logging.getLogger(__name__)


def _known_status(value: Any) -> Any:
    if isinstance(value, str) and value not in FlowStatus.__members__:
        logger.debug("unrecognised status %r treated as UNKNOWN", value)
        return FlowStatus.UNKNOWN
    return value


class UploadRequest(BaseModel):
    """Metadata for a single submission, sent as the ``request`` form field."""

    model_config = _WIRE_CONFIG

    name: str | None = Field(default=None, alias="benchmarkName")
    repo_owner: str | None = None
    repo_name: str | None = None
    pull_request_id: str | None = None
    branch: str | None = None
    commit_sha: str | None = None
    env: dict[str, str] = Field(default_factory=dict)
    agent: str = "github"
    android_api_level: int | None = None
    ios_version: int | None = Field(default=None, alias="iOSVersion")
    include_tags: list[str] = Field(default_factory=list)
    exclude_tags: list[str] = Field(default_factory=list)
    app_binary_id: str | None = None
    device_locale: str | None = None

    def to_payload(self, target: BackendTarget, project_id: str | None = None) -> dict[str, Any]:
        """Serialise to the JSON schema expected by *target*, omitting unset fields."""
        if target is BackendTarget.CLOUD:
            return self.model_dump(mode="json", by_alias=True, exclude_none=True)

        payload = self.model_dump(mode="json", by_alias=True, exclude_none=True, exclude=_PROJECT_EXCLUDED)
        payload["projectId"] = project_id
        return payload


class UploadJob(BaseModel):
    """Handle to a submitted upload."""

    model_config = {"frozen": True}

    upload_id: str
    console_url: str
    target: BackendTarget
    app_binary_id: str | None = None


class Flow(BaseModel):
    """One test flow within an upload, as last reported by the service."""

    model_config = _WIRE_CONFIG

    name: str
    status: FlowStatus
    errors: list[str] | None = None
    cancellation_reason: CancellationReason | None = None

    normalize_status = field_validator("status", mode="before")(_known_status)

    @field_validator("cancellation_reason", mode="before")
    @classmethod
    def unknown_reason_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and value not in CancellationReason.__members__:
            return None
        return value


class StatusSnapshot(BaseModel):
    """Full state of an upload as returned by one status query."""

    model_config = _WIRE_CONFIG

    upload_id: str
    status: FlowStatus
    completed: bool = False
    flows: list[Flow] = Field(default_factory=list)

    normalize_status = field_validator("status", mode="before")(_known_status)


class PollOutcome(BaseModel):
    """Terminal result of a polling session, translated to an exit status by the caller."""

    model_config = {"frozen": True}

    result: PollResult
    status: FlowStatus | None = None
    flows: list[Flow] = Field(default_factory=list)
    message: str = ""

    @property
    def failed(self) -> bool:
        if self.result is PollResult.FAILED:
            return True
        return self.result is PollResult.COMPLETED and self.status is FlowStatus.ERROR
