"""
Job tracking types.

These are member-local state containers, not wire protocol messages.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class JobStatus(str, Enum):
    """Status of a site job."""
    PENDING = "pending"        # Submitted, waiting for a concurrency slot
    RUNNING = "running"        # Holds the slot, initiator/worker tasks executing
    SUCCEEDED = "succeeded"    # All coordinator-side tasks completed
    FAILED = "failed"          # A task returned an error


@dataclass
class JobInfo:
    """
    State of a single job on the member that runs it.

    progress is a percentage in the range 0..100 and never decreases.
    """
    job_id: str
    job_type: str
    site: str
    node_id: str
    parallel_limit: int = 1
    status: JobStatus = JobStatus.PENDING
    progress: float = 0.0
    error: str | None = None
    traceback: str | None = None
    messages: list[str] = field(default_factory=list)
    created_at: float = field(default_factory=time.monotonic)
    started_at: float | None = None
    finished_at: float | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (JobStatus.SUCCEEDED, JobStatus.FAILED)

    @property
    def elapsed_seconds(self) -> float:
        if self.started_at is None:
            return 0.0

        end = self.finished_at if self.finished_at is not None else time.monotonic()
        return end - self.started_at


@dataclass(slots=True)
class PipelineResult:
    """Outcome of running an ordered list of steps."""
    error: Exception | None = None
    results: list[Any] = field(default_factory=list)
    completed_steps: int = 0
    total_steps: int = 0

    @property
    def success(self) -> bool:
        return self.error is None
