"""
Jobs module - Site job coordination components.

Coordinator-side:
- JobManager: Member-local job tracking and submission
- JobRunner / ClusterJobRunner / SiteJobRunner: Two-phase job lifecycle
- SiteActivateJob / SiteDeactivateJob: Concrete site jobs

Supporting types:
- TaskPipeline: Ordered, short-circuiting step execution
- ProgressTracker: Per-job monotonic progress
- ConcurrencyLimiter: Per-resource bound on in-flight jobs
- JobStateMachine: Job status transitions
- JobRegistry: Job type tag / command to job class lookup
"""

from sitesync.jobs.concurrency_limiter import (
    ConcurrencyLimiter as ConcurrencyLimiter,
)
from sitesync.jobs.progress_tracker import ProgressTracker as ProgressTracker
from sitesync.jobs.task_pipeline import (
    Step as Step,
    TaskPipeline as TaskPipeline,
)
from sitesync.jobs.job_state_machine import JobStateMachine as JobStateMachine
from sitesync.jobs.job_runner import JobRunner as JobRunner
from sitesync.jobs.cluster_job_runner import ClusterJobRunner as ClusterJobRunner
from sitesync.jobs.site_job_runner import SiteJobRunner as SiteJobRunner
from sitesync.jobs.site_activate_job import SiteActivateJob as SiteActivateJob
from sitesync.jobs.site_deactivate_job import SiteDeactivateJob as SiteDeactivateJob
from sitesync.jobs.job_registry import (
    JobRegistry as JobRegistry,
    JobType as JobType,
    create_default_registry as create_default_registry,
)
from sitesync.jobs.job_manager import JobManager as JobManager
from sitesync.jobs.logging_models import (
    JobRunnerTrace as JobRunnerTrace,
    JobRunnerDebug as JobRunnerDebug,
    JobRunnerInfo as JobRunnerInfo,
    JobRunnerWarning as JobRunnerWarning,
    JobRunnerError as JobRunnerError,
    JobManagerInfo as JobManagerInfo,
    JobManagerError as JobManagerError,
)
