"""Dispatchers that execute ``DispatchJob`` instances.

``BoundedDispatcher`` runs jobs on one background thread in FIFO order
behind a fixed-capacity queue.  A full queue never blocks the caller:
the job is rejected and its callback receives ``on_failure()``.

``InlineDispatcher`` runs each job on the submitting thread and is meant
for tests and scripts that want deterministic, synchronous sends.
"""

from __future__ import annotations

import queue
import threading
from abc import ABC, abstractmethod
from typing import Optional

import structlog

from opengts_client.errors import AdmissionError
from opengts_client.job import DispatchJob

logger = structlog.get_logger(__name__)

DEFAULT_QUEUE_CAPACITY = 128

_STOP = object()


class Dispatcher(ABC):
    """Accepts jobs for execution."""

    @abstractmethod
    def submit(self, job: DispatchJob) -> bool:
        """Queue *job*.  Returns ``False`` if it was rejected."""


class InlineDispatcher(Dispatcher):
    """Runs every job immediately on the caller's thread."""

    def submit(self, job: DispatchJob) -> bool:
        _run_job(job)
        return True


class BoundedDispatcher(Dispatcher):
    """Single worker thread fed by a bounded FIFO queue."""

    def __init__(
        self,
        capacity: int = DEFAULT_QUEUE_CAPACITY,
        name: str = "opengts-dispatcher",
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._name = name
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=capacity)
        self._lock = threading.Lock()
        self._worker: Optional[threading.Thread] = None
        self._stopped = False

    # -- lifecycle ----------------------------------------------------------

    def start(self) -> None:
        with self._lock:
            if self._stopped:
                raise RuntimeError("dispatcher has been stopped")
            self._ensure_worker()

    def stop(self, drain: bool = True, timeout: Optional[float] = None) -> None:
        """Stop accepting jobs and shut the worker down.

        With *drain* the queued jobs still run first; otherwise they are
        rejected.
        """
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            worker = self._worker

        if not drain or worker is None:
            self._reject_pending("dispatcher stopped")

        if worker is not None:
            # May wait for a free slot; queued jobs are never dropped.
            self._queue.put(_STOP)
            worker.join(timeout)
        logger.info("dispatcher_stopped", name=self._name, drained=drain)

    def __enter__(self) -> "BoundedDispatcher":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    # -- public API ---------------------------------------------------------

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def submit(self, job: DispatchJob) -> bool:
        error: Optional[AdmissionError] = None
        with self._lock:
            if self._stopped:
                error = AdmissionError("dispatcher stopped")
            else:
                self._ensure_worker()
                try:
                    self._queue.put_nowait(job)
                except queue.Full:
                    error = AdmissionError(
                        "dispatch queue full", queue_size=self._capacity
                    )
        if error is not None:
            _reject_job(job, error)
            return False
        return True

    def join(self) -> None:
        """Block until every queued job has run."""
        self._queue.join()

    # -- internal -----------------------------------------------------------

    def _ensure_worker(self) -> None:
        # Caller holds self._lock.
        if self._worker is not None:
            return
        self._worker = threading.Thread(
            target=self._work, name=self._name, daemon=True
        )
        self._worker.start()
        logger.info("dispatcher_started", name=self._name, capacity=self._capacity)

    def _work(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                _run_job(item)
            finally:
                self._queue.task_done()

    def _reject_pending(self, reason: str) -> None:
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return
            self._queue.task_done()
            if isinstance(item, DispatchJob):
                _reject_job(item, AdmissionError(reason))


def _run_job(job: DispatchJob) -> None:
    try:
        job.run()
    except Exception:
        logger.exception("job_crashed")


def _reject_job(job: DispatchJob, error: AdmissionError) -> None:
    try:
        job.reject(error)
    except Exception:
        logger.exception("job_reject_callback_crashed")


_default: Optional[BoundedDispatcher] = None
_default_lock = threading.Lock()


def default_dispatcher() -> BoundedDispatcher:
    """Process-wide shared dispatcher, created on first use."""
    global _default
    with _default_lock:
        if _default is None:
            _default = BoundedDispatcher()
        return _default
