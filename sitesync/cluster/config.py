"""
Member configuration for ClusterMember.

Derived from Env so a member can be configured entirely through
SITESYNC_* environment variables or a .env file.
"""

import uuid
from dataclasses import dataclass

from sitesync.env import Env


@dataclass(slots=True)
class MemberConfig:
    """Configuration settings for a cluster member."""

    node_id: str
    default_parallel_limit: int = 1
    concurrency_wait_timeout: float | None = 30.0
    logfile_path: str | None = None

    @classmethod
    def from_env(
        cls,
        env: Env,
        node_id: str | None = None,
    ) -> "MemberConfig":
        """Create a config instance from environment settings."""
        if node_id is None:
            node_id = env.SITESYNC_NODE_ID or f"node-{uuid.uuid4().hex[:8]}"

        return cls(
            node_id=node_id,
            default_parallel_limit=env.SITESYNC_SITE_JOB_PARALLEL_LIMIT,
            concurrency_wait_timeout=env.concurrency_wait_timeout,
            logfile_path=env.get_logfile_path(node_id),
        )
