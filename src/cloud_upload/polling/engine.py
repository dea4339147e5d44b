"""Status polling loop with rate-limit backoff, bounded retry and a timeout watchdog."""

from __future__ import annotations

import logging

from cloud_upload.gateway.interfaces import UploadGateway
from cloud_upload.polling.reporter import ResultReporter, failed_flows_message
from cloud_upload.polling.session import PollingSession
from cloud_upload.polling.tracker import collect_terminal
from cloud_upload.shared.enums import FlowStatus, PollResult
from cloud_upload.shared.exceptions import StatusQueryError
from cloud_upload.shared.models import PollOutcome, StatusSnapshot, UploadJob

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 10.0
DEFAULT_TIMEOUT_SECONDS = 30 * 60.0
DEFAULT_MAX_SERVER_ERRORS = 3
DEFAULT_BACKOFF_FACTOR = 1.25
DEFAULT_MAX_INTERVAL_SECONDS = 300.0


class PollingEngine:
    """Poll an upload's status until it completes, fails or times out.

    Per tick:
    1. Stop if the watchdog has fired.
    2. Fetch a snapshot, report newly terminal flows, finish if completed.
    3. On 429, stretch the interval by the backoff factor (up to the ceiling).
    4. On 5xx, retry at the same interval until the budget of consecutive
       server errors is spent; any successful fetch restores the budget.
    5. On anything else, fail immediately.

    The engine never raises for status errors and never exits the process;
    the caller turns the returned ``PollOutcome`` into an exit status.
    """

    def __init__(
        self,
        *,
        gateway: UploadGateway,
        reporter: ResultReporter,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_server_errors: int = DEFAULT_MAX_SERVER_ERRORS,
        backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
        max_interval: float = DEFAULT_MAX_INTERVAL_SECONDS,
    ) -> None:
        self._gateway = gateway
        self._reporter = reporter
        self._interval = interval
        self._timeout = timeout
        self._max_server_errors = max_server_errors
        self._backoff_factor = backoff_factor
        self._max_interval = max(max_interval, interval)

    async def poll(self, job: UploadJob) -> PollOutcome:
        """Track *job* to a terminal outcome."""
        session = PollingSession(job=job, interval=self._interval)
        session.start_watchdog(self._timeout, lambda: self._reporter.timed_out(job.console_url))
        self._reporter.waiting()
        try:
            return await self._run(session)
        finally:
            session.cancel_watchdog()

    async def _run(self, session: PollingSession) -> PollOutcome:
        upload_id = session.job.upload_id

        while True:
            if session.stopped:
                return PollOutcome(
                    result=PollResult.TIMED_OUT,
                    message=f"Timed out waiting for upload {upload_id} to complete",
                )

            try:
                snapshot = await self._gateway.get_status(upload_id)
            except StatusQueryError as exc:
                if exc.status == 429:
                    session.interval = min(session.interval * self._backoff_factor, self._max_interval)
                    logger.info("upload %s: rate limited, next poll in %.1fs", upload_id, session.interval)
                elif exc.status is not None and exc.status >= 500:
                    if session.server_errors >= self._max_server_errors:
                        return self._fail(
                            session,
                            f"Request to get status information failed with status code {exc.status}: {exc.body}",
                        )
                    session.server_errors += 1
                    logger.warning(
                        "upload %s: status query failed with %d (retry %d/%d)",
                        upload_id,
                        exc.status,
                        session.server_errors,
                        self._max_server_errors,
                    )
                else:
                    return self._fail(session, "Could not get Upload status", exc)
                await self._sleep(session, session.interval)
                continue
            except Exception as exc:
                return self._fail(session, "Could not get Upload status", exc)

            # The server-error budget counts consecutive failures only.
            session.server_errors = 0
            fresh, session.reported = collect_terminal(session.reported, snapshot, session.job.target)
            for flow in fresh:
                self._reporter.flow_result(flow)

            if snapshot.completed:
                session.cancel_watchdog()
                return self._complete(session, snapshot)

            await self._sleep(session, session.interval)

    async def _sleep(self, session: PollingSession, seconds: float) -> None:
        await session.sleep(seconds)

    def _complete(self, session: PollingSession, snapshot: StatusSnapshot) -> PollOutcome:
        self._reporter.summary(snapshot.status, snapshot.flows)
        self._reporter.console_link(session.job.console_url)
        self._reporter.publish(snapshot.status, snapshot.flows)

        message = failed_flows_message(snapshot.flows) if snapshot.status is FlowStatus.ERROR else ""
        logger.info("upload %s completed with status %s", session.job.upload_id, snapshot.status.value)
        return PollOutcome(
            result=PollResult.COMPLETED,
            status=snapshot.status,
            flows=snapshot.flows,
            message=message,
        )

    def _fail(self, session: PollingSession, msg: str, error: Exception | None = None) -> PollOutcome:
        if error is not None:
            msg += f" - received error {error}"
        msg += f". View the Upload in the console for more information: {session.job.console_url}"
        logger.error("upload %s: polling failed: %s", session.job.upload_id, msg)
        return PollOutcome(result=PollResult.FAILED, message=msg)
