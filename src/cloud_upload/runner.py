"""End-to-end upload run: validate inputs, submit, poll, report."""

from __future__ import annotations

import asyncio
import logging
import sys
import tempfile

from pydantic import ValidationError as SettingsError

from cloud_upload.config import GitHubContext, Settings, get_github_context, get_settings
from cloud_upload.console import RichConsole
from cloud_upload.gateway.client import RemoteUploadGateway
from cloud_upload.gateway.interfaces import UploadGateway
from cloud_upload.inputs.app_file import validate_app_file, validate_mapping_file
from cloud_upload.inputs.archive import create_workspace_zip
from cloud_upload.inputs.params import build_request
from cloud_upload.outputs import GitHubOutputs
from cloud_upload.polling.engine import PollingEngine
from cloud_upload.polling.interfaces import ConsoleOutput, OutputSink
from cloud_upload.polling.reporter import ResultReporter
from cloud_upload.shared.exceptions import CloudUploadError, ValidationError
from cloud_upload.shared.models import PollOutcome

logger = logging.getLogger(__name__)


async def run(
    settings: Settings,
    github: GitHubContext,
    *,
    console: ConsoleOutput,
    outputs: OutputSink,
    gateway: UploadGateway | None = None,
) -> int:
    """Run one upload and return the process exit code.

    Local validation errors and upload failures are reported as a single
    error line; the polling outcome decides the code otherwise.
    """
    try:
        with tempfile.TemporaryDirectory(prefix="cloud-upload-") as work_dir:
            return await _run(settings, github, console, outputs, gateway, work_dir)
    except CloudUploadError as exc:
        logger.error("upload run failed: %s", exc)
        console.err(f"Error running cloud upload: {exc}")
        return 1


async def _run(
    settings: Settings,
    github: GitHubContext,
    console: ConsoleOutput,
    outputs: OutputSink,
    gateway: UploadGateway | None,
    work_dir: str,
) -> int:
    if not settings.api_key:
        raise ValidationError("api_key is required")
    if not settings.app_file and not settings.app_binary_id:
        raise ValidationError("either app_file or app_binary_id is required")

    request = build_request(settings, github)

    app_path = None
    if settings.app_file:
        app_file = validate_app_file(settings.app_file, github.workspace, work_dir)
        logger.info("app file %s (%s)", app_file.path, app_file.type.value)
        app_path = app_file.path

    workspace_zip = create_workspace_zip(settings.workspace or None, work_dir)
    mapping_path = (
        validate_mapping_file(settings.mapping_file, github.workspace, work_dir) if settings.mapping_file else None
    )

    if gateway is None:
        gateway = RemoteUploadGateway(
            settings.api_key,
            settings.api_url,
            project_id=settings.project_id or None,
            timeout=settings.request_timeout_seconds,
        )

    console.info("Uploading to the cloud")
    job = await gateway.upload(request, app_path, workspace_zip, mapping_path)

    prefix = job.target.output_prefix
    console.info(f"Visit the web console for more details about the upload: {job.console_url}\n")
    outputs.set_output(f"{prefix}_CONSOLE_URL", job.console_url)
    if job.app_binary_id:
        outputs.set_output(f"{prefix}_APP_BINARY_ID", job.app_binary_id)

    if settings.async_mode:
        logger.info("async mode: not waiting for upload %s", job.upload_id)
        return 0

    engine = PollingEngine(
        gateway=gateway,
        reporter=ResultReporter(console, outputs),
        interval=settings.poll_interval_seconds,
        timeout=settings.timeout_minutes * 60,
        max_server_errors=settings.max_server_error_retries,
        max_interval=settings.max_poll_interval_seconds,
    )
    outcome = await engine.poll(job)
    return exit_code(outcome, console)


def exit_code(outcome: PollOutcome, console: ConsoleOutput) -> int:
    """Translate a polling outcome into a process exit code."""
    if outcome.failed:
        console.err(outcome.message)
        return 1
    return 0


def main() -> None:
    """Entry point for ``cloud-upload`` and ``python -m cloud_upload.runner``."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    console = RichConsole()
    try:
        settings = get_settings()
        github = get_github_context()
    except SettingsError as exc:
        console.err(f"Error running cloud upload: invalid configuration: {exc}")
        sys.exit(1)

    sys.exit(asyncio.run(run(settings, github, console=console, outputs=GitHubOutputs())))


if __name__ == "__main__":
    main()
