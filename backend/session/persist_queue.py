"""
Persist queue for session side effects.

The engine applies every transition in memory first, then submits the
durable writes (workout logs, goal updates, schedule upserts) here as
commands. Commands run in submission order when the queue is flushed. A
failing command is logged and kept as FAILED; it never undoes the in-memory
transition and never blocks later commands.

There is no automatic retry. Failed jobs stay inspectable and can be re-run
explicitly with retry_failed().
"""

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from threading import Lock
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class PersistStatus(str, Enum):
    """Status states for persist jobs."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class PersistJob:
    """
    A single durable write waiting to run.

    Attributes:
        name: Short label used in logs, e.g. "workout-log" or "schedule"
        command: Zero-argument callable performing the write
        id: Unique identifier for the job
        status: Current status of the job
        result: Return value of the command when it completed
        error: Error message if the job failed
        attempts: How many times the command ran
    """

    name: str
    command: Callable[[], Any]
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: PersistStatus = PersistStatus.PENDING
    result: Optional[Any] = None
    error: Optional[str] = None
    attempts: int = 0


class PersistQueue:
    """
    FIFO of persist commands.

    submit() only records the command; the owner calls flush() once its
    in-memory transition is done. Flushes are serialized so commands run in
    submission order even when several threads flush.
    """

    def __init__(self, keep_completed: int = 100):
        self._keep_completed = keep_completed
        self._jobs: Dict[str, PersistJob] = {}
        self._pending: List[str] = []
        self._lock = Lock()
        self._flush_lock = Lock()

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def submit(self, name: str, command: Callable[[], Any]) -> str:
        """
        Add a command to the queue.

        Args:
            name: Label for logs
            command: Callable performing the write

        Returns:
            The job ID
        """
        job = PersistJob(name=name, command=command)
        with self._lock:
            self._jobs[job.id] = job
            self._pending.append(job.id)

        logger.debug(f"Enqueued {name} job {job.id}")
        return job.id

    def flush(self) -> int:
        """
        Run all pending jobs in submission order.

        Returns:
            Number of jobs that failed during this flush
        """
        failed = 0
        with self._flush_lock:
            while True:
                with self._lock:
                    if not self._pending:
                        break
                    job_id = self._pending.pop(0)
                if not self._process(job_id):
                    failed += 1
            self._prune()
        return failed

    def retry_failed(self) -> int:
        """
        Re-queue every failed job and flush.

        Returns:
            Number of jobs still failing afterwards
        """
        with self._lock:
            failed_ids = [j.id for j in self._jobs.values() if j.status == PersistStatus.FAILED]
            for job_id in failed_ids:
                self._jobs[job_id].status = PersistStatus.PENDING
                self._pending.append(job_id)
        if failed_ids:
            logger.info(f"Retrying {len(failed_ids)} failed persist job(s)")
        return self.flush()

    def get_status(self, job_id: str) -> Optional[Dict[str, Any]]:
        """
        Get the current status of a job.

        Args:
            job_id: The job identifier

        Returns:
            Dictionary with job status info, or None if job not found
        """
        job = self._jobs.get(job_id)
        if job is None:
            return None

        return {
            "id": job.id,
            "name": job.name,
            "status": job.status.value,
            "result": job.result,
            "error": job.error,
            "attempts": job.attempts,
        }

    def failed_jobs(self) -> List[PersistJob]:
        with self._lock:
            return [j for j in self._jobs.values() if j.status == PersistStatus.FAILED]

    def _process(self, job_id: str) -> bool:
        """
        Process a single job.

        Returns:
            True if the command succeeded
        """
        job = self._jobs.get(job_id)
        if job is None:
            logger.warning(f"Job {job_id} not found for processing")
            return True

        job.status = PersistStatus.PROCESSING
        job.attempts += 1

        try:
            job.result = job.command()
            job.error = None
            job.status = PersistStatus.COMPLETED
            logger.debug(f"{job.name} job {job_id} completed")
            return True
        except Exception as e:
            job.error = str(e)
            job.status = PersistStatus.FAILED
            logger.error(f"{job.name} job {job_id} failed: {e}")
            return False

    def _prune(self) -> None:
        """Drop the oldest completed jobs beyond ``keep_completed``."""
        with self._lock:
            completed = [j.id for j in self._jobs.values() if j.status == PersistStatus.COMPLETED]
            for job_id in completed[: max(0, len(completed) - self._keep_completed)]:
                del self._jobs[job_id]
