"""
Logging models for the jobs module.

Each model identifies the member running the job (node_id), the job
(job_id, job_type) and the site it targets.
"""

from sitesync.logging.models import Entry, LogLevel


# =============================================================================
# JobRunner Logging Models
# =============================================================================

class JobRunnerTrace(Entry, kw_only=True):
    """Trace-level logging for JobRunner operations."""
    node_id: str
    job_id: str
    job_type: str
    site: str
    level: LogLevel = LogLevel.TRACE


class JobRunnerDebug(Entry, kw_only=True):
    """Debug-level logging for JobRunner operations."""
    node_id: str
    job_id: str
    job_type: str
    site: str
    level: LogLevel = LogLevel.DEBUG


class JobRunnerInfo(Entry, kw_only=True):
    """Info-level logging for JobRunner operations."""
    node_id: str
    job_id: str
    job_type: str
    site: str
    level: LogLevel = LogLevel.INFO


class JobRunnerWarning(Entry, kw_only=True):
    """Warning-level logging for JobRunner operations."""
    node_id: str
    job_id: str
    job_type: str
    site: str
    level: LogLevel = LogLevel.WARN


class JobRunnerError(Entry, kw_only=True):
    """Error-level logging for JobRunner operations."""
    node_id: str
    job_id: str
    job_type: str
    site: str
    traceback: str = ""
    level: LogLevel = LogLevel.ERROR


# =============================================================================
# JobManager Logging Models
# =============================================================================

class JobManagerInfo(Entry, kw_only=True):
    """Info-level logging for JobManager operations."""
    node_id: str
    job_id: str
    status: str
    level: LogLevel = LogLevel.INFO


class JobManagerError(Entry, kw_only=True):
    """Error-level logging for JobManager operations."""
    node_id: str
    job_id: str
    status: str
    level: LogLevel = LogLevel.ERROR
