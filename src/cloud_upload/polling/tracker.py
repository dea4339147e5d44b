"""Detection of flows that became terminal since the previous snapshot."""

from __future__ import annotations

from cloud_upload.shared.enums import BackendTarget
from cloud_upload.shared.models import Flow, StatusSnapshot


def is_terminal(flow: Flow, target: BackendTarget) -> bool:
    """Return True if *flow* will not change status any more on *target*."""
    return flow.status in target.terminal_statuses


def collect_terminal(
    reported: frozenset[str],
    snapshot: StatusSnapshot,
    target: BackendTarget,
) -> tuple[list[Flow], frozenset[str]]:
    """Split out the terminal flows of *snapshot* that were not reported yet.

    Flows are matched by name. A flow that was already reported is skipped
    even if its status has since changed.

    Args:
        reported: Names reported earlier in the session.
        snapshot: Current status snapshot.
        target: Backend that produced the snapshot; decides which statuses are terminal.

    Returns:
        Tuple of (newly terminal flows in snapshot order, updated reported names).
    """
    seen = set(reported)
    fresh: list[Flow] = []
    for flow in snapshot.flows:
        if flow.name in seen or not is_terminal(flow, target):
            continue
        fresh.append(flow)
        seen.add(flow.name)
    return fresh, frozenset(seen)
