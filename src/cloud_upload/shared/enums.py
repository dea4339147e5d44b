"""Domain enumerations used across all modules."""

from __future__ import annotations

from enum import Enum, unique


@unique
class FlowStatus(str, Enum):
    """Status of a single flow, and of the upload as a whole."""

    PENDING = "PENDING"
    RUNNING = "RUNNING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    CANCELED = "CANCELED"
    WARNING = "WARNING"
    STOPPED = "STOPPED"
    # Any status this client does not know; never terminal.
    UNKNOWN = "UNKNOWN"


@unique
class CancellationReason(str, Enum):
    """Why the service canceled a flow before it finished."""

    BENCHMARK_DEPENDENCY_FAILED = "BENCHMARK_DEPENDENCY_FAILED"
    INFRA_ERROR = "INFRA_ERROR"
    OVERLAPPING_BENCHMARK = "OVERLAPPING_BENCHMARK"
    TIMEOUT = "TIMEOUT"


@unique
class AppFileType(str, Enum):
    """Supported app binary formats."""

    ANDROID_APK = "ANDROID_APK"
    IOS_BUNDLE = "IOS_BUNDLE"


@unique
class PollResult(str, Enum):
    """How a polling session ended."""

    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@unique
class BackendTarget(str, Enum):
    """Remote service shape an upload is sent to.

    Both targets share the polling contract; they differ in endpoint paths,
    request schema and the set of flow statuses that count as terminal.
    """

    CLOUD = "cloud"
    PROJECT = "project"

    @property
    def upload_path(self) -> str:
        return _UPLOAD_PATHS[self]

    def status_path(self, upload_id: str) -> str:
        return _STATUS_PATHS[self].format(upload_id=upload_id)

    @property
    def terminal_statuses(self) -> frozenset[FlowStatus]:
        return _TERMINAL_STATUSES[self]

    @property
    def output_prefix(self) -> str:
        """Prefix of the CI outputs published right after upload."""
        return _OUTPUT_PREFIXES[self]


_UPLOAD_PATHS = {
    BackendTarget.CLOUD: "/v2/upload",
    BackendTarget.PROJECT: "/runMaestroTest",
}

_STATUS_PATHS = {
    BackendTarget.CLOUD: "/v2/upload/{upload_id}/status?includeErrors=true",
    BackendTarget.PROJECT: "/upload/{upload_id}",
}

_TERMINAL_STATUSES = {
    BackendTarget.CLOUD: frozenset({FlowStatus.SUCCESS, FlowStatus.ERROR, FlowStatus.WARNING, FlowStatus.CANCELED}),
    BackendTarget.PROJECT: frozenset({FlowStatus.SUCCESS, FlowStatus.ERROR, FlowStatus.STOPPED}),
}

_OUTPUT_PREFIXES = {
    BackendTarget.CLOUD: "MAESTRO_CLOUD",
    BackendTarget.PROJECT: "ROBIN",
}
