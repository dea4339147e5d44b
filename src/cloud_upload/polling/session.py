"""Client-side state for polling one upload."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from cloud_upload.shared.models import UploadJob

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PollingSession:
    """Mutable polling state owned by a single ``PollingEngine.poll()`` call."""

    job: UploadJob
    interval: float
    server_errors: int = 0
    reported: frozenset[str] = frozenset()
    _stop: asyncio.Event = field(default_factory=asyncio.Event)
    _watchdog: asyncio.Task[None] | None = None

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def start_watchdog(self, timeout: float, on_timeout: Callable[[], None]) -> None:
        """Stop the session after *timeout* seconds unless it ends first."""
        self._watchdog = asyncio.create_task(self._watch(timeout, on_timeout))

    def cancel_watchdog(self) -> None:
        if self._watchdog is not None and not self._watchdog.done():
            self._watchdog.cancel()

    async def sleep(self, seconds: float) -> None:
        """Wait *seconds*, returning early once the session is stopped."""
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(self._stop.wait(), timeout=seconds)

    async def _watch(self, timeout: float, on_timeout: Callable[[], None]) -> None:
        await asyncio.sleep(timeout)
        logger.warning("upload %s: gave up waiting after %.0fs", self.job.upload_id, timeout)
        self._stop.set()
        on_timeout()
