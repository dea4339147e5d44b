"""Build the upload request from settings and the GitHub workflow context."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from cloud_upload.config import GitHubContext, Settings
from cloud_upload.shared.exceptions import ValidationError
from cloud_upload.shared.models import UploadRequest

logger = logging.getLogger(__name__)

_REF_PATTERN = re.compile(r"refs/(heads|tags)/(.*)")


def parse_tags(raw: str) -> list[str]:
    """Parse ``"a, b"`` into ``["a", "b"]``; blank input yields no tags."""
    if not raw:
        return []
    if "," in raw:
        return [tag.strip() for tag in raw.split(",")]
    return [raw]


def parse_env(raw: str) -> dict[str, str]:
    """Parse newline separated ``KEY=VALUE`` pairs. Values may contain ``=``.

    Raises:
        ValidationError: If a non-blank line has no ``=``.
    """
    env: dict[str, str] = {}
    for line in raw.splitlines():
        line = line.strip()
        if not line:
            continue
        key, sep, value = line.partition("=")
        if not sep:
            raise ValidationError(f"Invalid env parameter: {line}")
        env[key] = value
    return env


def load_event(github: GitHubContext) -> dict[str, Any]:
    """Read the webhook payload that triggered the workflow, if any."""
    if not github.event_path:
        return {}
    path = Path(github.event_path)
    if not path.is_file():
        logger.warning("event payload %s not found", path)
        return {}
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Malformed event payload {path}: {exc}") from exc


def branch_name(github: GitHubContext, event: dict[str, Any]) -> str:
    """Head branch of the pull request, or the branch/tag of the pushed ref.

    Raises:
        ValidationError: If neither can be determined.
    """
    pull_request = event.get("pull_request")
    if pull_request:
        ref = (pull_request.get("head") or {}).get("ref") or github.head_ref
        if not ref:
            raise ValidationError(f"Unable to find pull request ref: {json.dumps(pull_request, indent=2)}")
        return ref

    match = _REF_PATTERN.search(github.ref)
    if not match:
        raise ValidationError(f"Failed to parse GitHub ref: {github.ref}")
    return match.group(2)


def commit_sha(event: dict[str, Any]) -> str | None:
    pull_request = event.get("pull_request") or {}
    return (pull_request.get("head") or {}).get("sha")


def pull_request_id(event: dict[str, Any]) -> str | None:
    number = (event.get("pull_request") or {}).get("number")
    if number is None:
        return None
    return str(number)


def inferred_name(github: GitHubContext, event: dict[str, Any]) -> str:
    """Pull request title, else the pushed head commit message, else the commit sha."""
    title = (event.get("pull_request") or {}).get("title")
    if title:
        return str(title)

    if github.event_name == "push":
        message = (event.get("head_commit") or {}).get("message")
        if message:
            return message

    return github.sha


def build_request(settings: Settings, github: GitHubContext, event: dict[str, Any] | None = None) -> UploadRequest:
    """Assemble the immutable upload request.

    Raises:
        ValidationError: On malformed env lines or an unresolvable branch.
    """
    if event is None:
        event = load_event(github)

    owner, _, repo = github.repository.partition("/")
    return UploadRequest(
        name=settings.name or inferred_name(github, event),
        repo_owner=owner or None,
        repo_name=repo or None,
        pull_request_id=pull_request_id(event),
        branch=branch_name(github, event),
        commit_sha=commit_sha(event),
        env=parse_env(settings.env),
        android_api_level=settings.android_api_level,
        ios_version=settings.ios_version,
        include_tags=parse_tags(settings.include_tags),
        exclude_tags=parse_tags(settings.exclude_tags),
        app_binary_id=settings.app_binary_id or None,
        device_locale=settings.device_locale or None,
    )
