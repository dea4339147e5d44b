"""HTTP gateway to the remote test-execution service."""

from __future__ import annotations

import json
import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Any

import httpx

from cloud_upload.shared.enums import BackendTarget
from cloud_upload.shared.exceptions import StatusQueryError, TransportError, ValidationError
from cloud_upload.shared.models import StatusSnapshot, UploadJob, UploadRequest

logger = logging.getLogger(__name__)

CLOUD_CONSOLE_URL = "https://console.mobile.dev"
PROJECT_CONSOLE_URL = "https://copilot.mobile.dev"


class RemoteUploadGateway:
    """Submit uploads and query their status over HTTP.

    Implements the ``UploadGateway`` protocol. The backend target is fixed at
    construction: the project backend when a project id is given, the cloud
    backend otherwise.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str,
        *,
        project_id: str | None = None,
        timeout: int = 60,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url.rstrip("/")
        self._project_id = project_id or None
        self._target = BackendTarget.PROJECT if self._project_id else BackendTarget.CLOUD
        self._timeout = timeout

    @property
    def target(self) -> BackendTarget:
        return self._target

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}

    async def upload(
        self,
        request: UploadRequest,
        app_file_path: str | None = None,
        workspace_zip_path: str | None = None,
        mapping_file_path: str | None = None,
    ) -> UploadJob:
        """Send the multipart submission and return a handle to the new upload.

        Raises:
            ValidationError: If one of the files cannot be opened.
            TransportError: If the response is not 2xx or the request fails.
        """
        url = f"{self._api_url}{self._target.upload_path}"
        payload = request.to_payload(self._target, self._project_id)

        with ExitStack() as stack:
            parts: list[tuple[str, Any]] = [("request", (None, json.dumps(payload), "application/json"))]
            for field, path in (
                ("app_binary", app_file_path),
                ("workspace", workspace_zip_path),
                ("mapping", mapping_file_path),
            ):
                if path is None:
                    continue
                try:
                    handle = stack.enter_context(open(path, "rb"))
                except OSError as exc:
                    raise ValidationError(f"Cannot read {field} file {path}: {exc}") from exc
                parts.append((field, (Path(path).name, handle)))

            try:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.post(url, files=parts, headers=self._headers())
            except httpx.HTTPError as exc:
                raise TransportError(None, str(exc), url=url) from exc

        if not resp.is_success:
            raise TransportError(resp.status_code, resp.text, url=url)

        try:
            job = self._to_job(resp.json())
        except (KeyError, TypeError, ValueError) as exc:
            raise TransportError(resp.status_code, f"unexpected upload response: {resp.text[:200]}", url=url) from exc

        logger.info("created upload %s on %s backend", job.upload_id, self._target.value)
        return job

    async def get_status(self, upload_id: str) -> StatusSnapshot:
        """Fetch one status snapshot.

        Raises:
            StatusQueryError: If the service answers with status >= 400.
            TransportError: If the request itself fails.
        """
        url = f"{self._api_url}{self._target.status_path(upload_id)}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.get(url, headers=self._headers())
        except httpx.HTTPError as exc:
            raise TransportError(None, str(exc), url=url) from exc

        if resp.status_code >= 400:
            raise StatusQueryError(resp.status_code, resp.text, url=url)

        snapshot = StatusSnapshot.model_validate(resp.json())
        logger.debug(
            "upload %s status=%s completed=%s flows=%d",
            upload_id,
            snapshot.status.value,
            snapshot.completed,
            len(snapshot.flows),
        )
        return snapshot

    def _to_job(self, data: dict[str, Any]) -> UploadJob:
        upload_id = data["uploadId"]
        if self._target is BackendTarget.PROJECT:
            console_url = (
                f"{PROJECT_CONSOLE_URL}/project/{self._project_id}/maestro-test/app/{data['appId']}/upload/{upload_id}"
            )
        else:
            console_url = f"{CLOUD_CONSOLE_URL}/uploads/{upload_id}?teamId={data['teamId']}&appId={data['appBinaryId']}"
        return UploadJob(
            upload_id=upload_id,
            console_url=console_url,
            target=self._target,
            app_binary_id=data.get("appBinaryId"),
        )
