"""Dispatch job: sends one batch of fixes and reports a single outcome.

A job fires exactly one of ``on_complete()`` / ``on_failure()`` exactly
once.  ``OneShotCallback`` enforces this; the first outcome wins and any
later attempt is logged and dropped.
"""

from __future__ import annotations

import enum
import threading
from typing import List, Optional, Protocol, Sequence

import structlog

from opengts_client.errors import OpenGTSError
from opengts_client.gprmc import encode_sentence
from opengts_client.schemas import Endpoint, Fix, Identity
from opengts_client.transport import HttpTransport
from opengts_client.url_builder import build_request_url

logger = structlog.get_logger(__name__)


class Callback(Protocol):
    """Receiver of a job's outcome."""

    def on_complete(self) -> None: ...

    def on_failure(self) -> None: ...


class JobState(str, enum.Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class OneShotCallback:
    """Wraps a ``Callback`` so that at most one outcome is ever delivered."""

    def __init__(self, target: Callback) -> None:
        self._target = target
        self._lock = threading.Lock()
        self._outcome: Optional[JobState] = None

    @property
    def outcome(self) -> Optional[JobState]:
        return self._outcome

    def _latch(self, outcome: JobState) -> bool:
        with self._lock:
            if self._outcome is not None:
                return False
            self._outcome = outcome
            return True

    def on_complete(self) -> None:
        if self._latch(JobState.COMPLETED):
            self._target.on_complete()
        else:
            logger.debug("late_outcome_dropped", outcome="completed", latched=self._outcome)

    def on_failure(self) -> None:
        if self._latch(JobState.FAILED):
            self._target.on_failure()
        else:
            logger.debug("late_outcome_dropped", outcome="failed", latched=self._outcome)


class DispatchJob:
    """One ``send_locations`` call: an ordered batch of fixes to deliver."""

    def __init__(
        self,
        endpoint: Endpoint,
        identity: Identity,
        fixes: Sequence[Fix],
        transport: HttpTransport,
        callback: Callback,
        *,
        stop_on_first_failure: bool = True,
    ) -> None:
        self._endpoint = endpoint
        self._identity = identity
        self._fixes: List[Fix] = list(fixes)
        self._transport = transport
        self._callback = OneShotCallback(callback)
        self._stop_on_first_failure = stop_on_first_failure
        self.total = len(self._fixes)
        self.sent = 0
        self.state = JobState.PENDING

    @property
    def done(self) -> bool:
        return self.state in (JobState.COMPLETED, JobState.FAILED)

    # -- public API ---------------------------------------------------------

    def run(self) -> None:
        """Send every fix in order on the calling thread."""
        if self.state is not JobState.PENDING:
            raise RuntimeError(f"job already {self.state.value}")
        self.state = JobState.RUNNING
        log = logger.bind(device_id=self._identity.device_id, total=self.total)

        if not self._fixes:
            log.debug("empty_batch")
            self._finish(JobState.COMPLETED)
            return

        for index, fix in enumerate(self._fixes):
            if self.state is JobState.FAILED and self._stop_on_first_failure:
                log.info("remaining_fixes_skipped", skipped=self.total - index)
                break
            try:
                self._send_one(fix)
            except OpenGTSError as exc:
                log.error("fix_rejected", index=index, error=str(exc))
                self._finish(JobState.FAILED)
                continue
            except Exception:
                log.exception("fix_send_crashed", index=index)
                self._finish(JobState.FAILED)
                continue

            self.sent += 1
            log.debug("fix_sent", sent=self.sent)
            if self.sent == self.total:
                self._finish(JobState.COMPLETED)

    def reject(self, reason: OpenGTSError) -> None:
        """Fail the job without running it (admission refused)."""
        logger.warning(
            "job_rejected",
            device_id=self._identity.device_id,
            total=self.total,
            reason=str(reason),
        )
        self._finish(JobState.FAILED)

    # -- internal -----------------------------------------------------------

    def _send_one(self, fix: Fix) -> None:
        sentence = encode_sentence(fix)
        url = build_request_url(self._endpoint, self._identity, sentence, fix.altitude)
        logger.debug("sending_fix", url=url)
        self._transport.deliver(url)

    def _finish(self, state: JobState) -> None:
        if self.done:
            return
        self.state = state
        if state is JobState.COMPLETED:
            logger.info("job_completed", device_id=self._identity.device_id, sent=self.sent)
            self._callback.on_complete()
        else:
            logger.warning(
                "job_failed",
                device_id=self._identity.device_id,
                sent=self.sent,
                total=self.total,
            )
            self._callback.on_failure()
