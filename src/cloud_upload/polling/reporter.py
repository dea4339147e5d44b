"""Rendering of per-flow and aggregate results."""

from __future__ import annotations

import json
from collections.abc import Sequence

from cloud_upload.polling.interfaces import ConsoleOutput, OutputSink
from cloud_upload.shared.enums import CancellationReason, FlowStatus
from cloud_upload.shared.models import Flow

UPLOAD_STATUS_OUTPUT = "MAESTRO_CLOUD_UPLOAD_STATUS"
FLOW_RESULTS_OUTPUT = "MAESTRO_CLOUD_FLOW_RESULTS"

_SKIPPED_REASONS = {CancellationReason.BENCHMARK_DEPENDENCY_FAILED, CancellationReason.OVERLAPPING_BENCHMARK}


def canceled_label(reason: CancellationReason | None) -> str:
    if reason in _SKIPPED_REASONS:
        return "Skipped"
    if reason is CancellationReason.TIMEOUT:
        return "Timeout"
    return "Canceled"


def flow_word(count: int) -> str:
    return "Flow" if count == 1 else "Flows"


def failed_flows_message(flows: Sequence[Flow]) -> str:
    """Return e.g. ``"1/3 Flows Failed"``."""
    failed = sum(1 for flow in flows if flow.status is FlowStatus.ERROR)
    return f"{failed}/{len(flows)} {flow_word(len(flows))} Failed"


def _first_error(errors: list[str] | None) -> str:
    if not errors:
        return ""
    return f" ({errors[0]})"


class ResultReporter:
    """Write flow results to the console and publish job outputs."""

    def __init__(self, console: ConsoleOutput, outputs: OutputSink) -> None:
        self._console = console
        self._outputs = outputs

    def waiting(self) -> None:
        self._console.info("Waiting for analyses to complete...\n")

    def flow_result(self, flow: Flow) -> None:
        """Render one terminal flow; non-terminal statuses print nothing."""
        if flow.status is FlowStatus.SUCCESS:
            self._console.success(f"[Passed] {flow.name}")
        elif flow.status is FlowStatus.ERROR:
            self._console.err(f"[Failed] {flow.name}{_first_error(flow.errors)}")
        elif flow.status is FlowStatus.WARNING:
            self._console.warning(f"[Warning] {flow.name}")
        elif flow.status is FlowStatus.CANCELED:
            self._console.canceled(f"[{canceled_label(flow.cancellation_reason)}] {flow.name}")
        elif flow.status is FlowStatus.STOPPED:
            self._console.canceled(f"[Stopped] {flow.name}")

    def summary(self, status: FlowStatus, flows: Sequence[Flow]) -> None:
        """Render aggregate counts for a completed upload."""
        total = len(flows)
        if status is FlowStatus.ERROR:
            self._console.err(failed_flows_message(flows))
            return

        passed = sum(1 for flow in flows if flow.status in (FlowStatus.SUCCESS, FlowStatus.WARNING))
        canceled = sum(1 for flow in flows if flow.status is FlowStatus.CANCELED)
        stopped = sum(1 for flow in flows if flow.status is FlowStatus.STOPPED)

        if passed == 0:
            self._console.canceled("Upload Canceled")
            return

        self._console.success(f"{passed}/{total} {flow_word(total)} Passed")
        if canceled:
            self._console.canceled(f"{canceled}/{total} {flow_word(total)} Canceled")
        if stopped:
            self._console.canceled(f"{stopped}/{total} {flow_word(total)} Stopped")

    def console_link(self, console_url: str) -> None:
        self._console.info("==== View details in the console ====\n")
        self._console.info(console_url)

    def timed_out(self, console_url: str) -> None:
        self._console.warning(
            "Timed out waiting for Upload to complete. "
            f"View the Upload in the console for more information: {console_url}"
        )

    def publish(self, status: FlowStatus, flows: Sequence[Flow]) -> None:
        """Hand the overall status and full flow list to the CI caller."""
        self._outputs.set_output(UPLOAD_STATUS_OUTPUT, status.value)
        self._outputs.set_output(
            FLOW_RESULTS_OUTPUT,
            json.dumps([flow.model_dump(mode="json", by_alias=True, exclude_none=True) for flow in flows]),
        )
