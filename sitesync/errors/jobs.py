"""
Exceptions raised while coordinating site jobs.

Initiator-side errors (SiteNotFoundError, PersistenceError, BroadcastError)
abort the job pipeline and are returned to the job's caller. WorkerError is
member-local: it is logged on the member whose traffic gate failed and is
never sent back to the coordinator.
"""


class SiteSyncError(Exception):
    """Base class for all sitesync errors."""
    pass


class SiteNotFoundError(SiteSyncError):
    """
    Raised when the site record does not exist in the persistence layer.

    Fatal to the job. Nothing is written and no command is broadcast.
    """

    def __init__(self, site_uid: str) -> None:
        super().__init__("Site not found")
        self.site_uid = site_uid


class PersistenceError(SiteSyncError):
    """
    Raised when loading or saving a site record fails.

    Fatal to the job. No command is broadcast.
    """

    def __init__(self, site_uid: str, operation: str, reason: str) -> None:
        super().__init__(f"Failed to {operation} site {site_uid}: {reason}")
        self.site_uid = site_uid
        self.operation = operation


class BroadcastError(SiteSyncError):
    """
    Raised when a command could not be fanned out to the cluster.

    When this follows a successful write the stored site state and the
    members' runtime state disagree until the job is run again.
    """

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(f"Failed to broadcast {command}: {reason}")
        self.command = command


class WorkerError(SiteSyncError):
    """Raised when a member fails to apply a command to its traffic gate."""

    def __init__(self, node_id: str, site_uid: str, reason: str) -> None:
        super().__init__(f"Member {node_id} failed to update traffic for site {site_uid}: {reason}")
        self.node_id = node_id
        self.site_uid = site_uid


class ConcurrencyLimitError(SiteSyncError):
    """Raised when a job cannot obtain a concurrency slot."""

    def __init__(self, key: str, limit: int) -> None:
        super().__init__(f"Concurrency limit of {limit} reached for {key}")
        self.key = key
        self.limit = limit


class InvalidJobTransitionError(SiteSyncError):
    """Raised when a job status change is not a valid transition."""

    def __init__(self, job_id: str, from_status: str, to_status: str) -> None:
        super().__init__(f"Job {job_id} cannot move from {from_status} to {to_status}")
        self.job_id = job_id
        self.from_status = from_status
        self.to_status = to_status


class UnknownJobTypeError(SiteSyncError):
    """Raised when a job type or command has no registered job class."""
    pass
