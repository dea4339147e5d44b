"""Interfaces for the remote upload gateway."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from cloud_upload.shared.enums import BackendTarget
from cloud_upload.shared.models import StatusSnapshot, UploadJob, UploadRequest


@runtime_checkable
class UploadGateway(Protocol):
    """Protocol for submitting uploads and querying their status."""

    @property
    def target(self) -> BackendTarget:
        """Backend shape this gateway talks to."""
        ...

    async def upload(
        self,
        request: UploadRequest,
        app_file_path: str | None = None,
        workspace_zip_path: str | None = None,
        mapping_file_path: str | None = None,
    ) -> UploadJob:
        """Submit an upload.

        Args:
            request: Upload metadata.
            app_file_path: App binary to attach, if any.
            workspace_zip_path: Zipped test workspace to attach, if any.
            mapping_file_path: Obfuscation mapping file to attach, if any.

        Returns:
            Handle to the created upload.
        """
        ...

    async def get_status(self, upload_id: str) -> StatusSnapshot:
        """Fetch the current state of an upload.

        Args:
            upload_id: Identifier returned by :meth:`upload`.

        Returns:
            A fresh status snapshot.
        """
        ...
