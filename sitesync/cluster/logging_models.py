"""
Logging models for the cluster module.

Broadcaster models identify the publishing or receiving member and the
command message; member models identify the member and the site the
command refers to.
"""

from sitesync.logging.models import Entry, LogLevel


# =============================================================================
# CommandBroadcaster Logging Models
# =============================================================================

class BroadcasterDebug(Entry, kw_only=True):
    """Debug-level logging for command publish and delivery."""
    node_id: str
    command: str
    job_id: str
    message_id: str
    level: LogLevel = LogLevel.DEBUG


class BroadcasterWarning(Entry, kw_only=True):
    """Warning-level logging for command publish and delivery."""
    node_id: str
    command: str
    job_id: str
    message_id: str
    level: LogLevel = LogLevel.WARN


class BroadcasterError(Entry, kw_only=True):
    """Error-level logging for command publish and delivery."""
    node_id: str
    command: str
    job_id: str
    message_id: str
    traceback: str = ""
    level: LogLevel = LogLevel.ERROR


# =============================================================================
# ClusterMember Logging Models
# =============================================================================

class MemberDebug(Entry, kw_only=True):
    """Debug-level logging for ClusterMember operations."""
    node_id: str
    command: str
    site: str
    level: LogLevel = LogLevel.DEBUG


class MemberError(Entry, kw_only=True):
    """Error-level logging for ClusterMember operations."""
    node_id: str
    command: str
    site: str
    level: LogLevel = LogLevel.ERROR
