"""
Bounded waiting on dispatched deletion jobs.
"""

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Iterable, List, Optional

from .models import DeletionJobHandle, JobOutcome, JobState, JobStatus, JobWaitResult
from .provider.base import ResourceGroupProvider

logger = logging.getLogger(__name__)

# Extra seconds allowed for a provider wait to return after its own timeout
DEFAULT_GRACE_SECONDS = 5.0


class JobMonitor:
    """Waits on deletion jobs concurrently, each bounded by the same timeout."""

    def __init__(
        self,
        provider: ResourceGroupProvider,
        timeout_seconds: float,
        max_workers: Optional[int] = None,
        grace_seconds: float = DEFAULT_GRACE_SECONDS,
    ):
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")
        self.provider = provider
        self.timeout_seconds = timeout_seconds
        self.max_workers = max_workers
        self.grace_seconds = grace_seconds

    def monitor(self, handles: Iterable[DeletionJobHandle]) -> List[JobOutcome]:
        """
        Wait for every dispatched job and classify how it ended.

        Handles with a dispatch error are skipped. No exception raised while
        waiting on one job escapes or affects the others.

        Args:
            handles: Dispatcher output

        Returns:
            One outcome per dispatched handle, in handle order
        """
        pending = [h for h in handles if h.dispatched]
        if not pending:
            return []

        workers = self.max_workers or len(pending)
        logger.info(f"Waiting on {len(pending)} deletion jobs (timeout {self.timeout_seconds}s each, {workers} at a time)")

        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="rgsweep-monitor")
        try:
            started = time.monotonic()
            futures = [executor.submit(self.provider.wait_for_job, h.job, self.timeout_seconds) for h in pending]

            outcomes = []
            per_batch = self.timeout_seconds + self.grace_seconds
            for position, (handle, future) in enumerate(zip(pending, futures)):
                # jobs beyond the worker count queue behind earlier batches
                deadline = started + (position // workers + 1) * per_batch
                outcomes.append(self._collect(handle, future, deadline))
        finally:
            # timed-out waits are abandoned, the deletions keep running in Azure
            executor.shutdown(wait=False, cancel_futures=True)

        return outcomes

    def _collect(self, handle: DeletionJobHandle, future: Future, deadline: float) -> JobOutcome:
        name = handle.container_name
        remaining = max(0.0, deadline - time.monotonic())

        try:
            error = future.exception(timeout=remaining)
        except FuturesTimeoutError:
            logger.warning(f"Stopped waiting on deletion of {name}, job still running")
            return JobOutcome(name, JobStatus.TIMED_OUT, self._timeout_detail())

        # a TimeoutError raised by the provider itself lands here, not above
        if error is not None:
            logger.warning(f"Error while monitoring deletion of {name}: {error}")
            return JobOutcome(name, JobStatus.MONITOR_ERROR, str(error) or type(error).__name__)

        return self._classify(name, future.result())

    def _classify(self, name: str, result: JobWaitResult) -> JobOutcome:
        if result.state is JobState.SUCCEEDED:
            logger.info(f"Deletion of {name} succeeded")
            return JobOutcome(name, JobStatus.SUCCEEDED)

        if result.state is JobState.FAILED:
            logger.warning(f"Deletion of {name} failed: {result.error}")
            return JobOutcome(name, JobStatus.FAILED, result.error)

        logger.warning(f"Deletion of {name} still running after {self.timeout_seconds}s")
        return JobOutcome(name, JobStatus.TIMED_OUT, self._timeout_detail())

    def _timeout_detail(self) -> str:
        return f"Still running after {self.timeout_seconds}s"
