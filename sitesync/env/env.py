from __future__ import annotations
import os
from pydantic import BaseModel, StrictInt, StrictStr
from typing import Callable, Dict, Literal, Union

from .time_parser import TimeParser

PrimaryType = Union[str, int, float, bytes, bool]


class Env(BaseModel):
    SITESYNC_NODE_ID: StrictStr | None = None
    SITESYNC_LOG_LEVEL: StrictStr = "info"
    SITESYNC_LOG_OUTPUT: Literal["stdout", "stderr"] = "stderr"
    SITESYNC_LOGS_DIRECTORY: StrictStr | None = None
    SITESYNC_SITE_JOB_PARALLEL_LIMIT: StrictInt = 1
    SITESYNC_CONCURRENCY_WAIT_TIMEOUT: StrictStr = "30s"
    SITESYNC_BROADCAST_DELIVERY_TIMEOUT: StrictStr = "10s"

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "SITESYNC_NODE_ID": str,
            "SITESYNC_LOG_LEVEL": str,
            "SITESYNC_LOG_OUTPUT": str,
            "SITESYNC_LOGS_DIRECTORY": str,
            "SITESYNC_SITE_JOB_PARALLEL_LIMIT": int,
            "SITESYNC_CONCURRENCY_WAIT_TIMEOUT": str,
            "SITESYNC_BROADCAST_DELIVERY_TIMEOUT": str,
        }

    def get_logging_config(self) -> dict:
        """Get LoggingConfig.update() keyword arguments from environment settings."""
        return {
            'log_level': self.SITESYNC_LOG_LEVEL,
            'log_output': self.SITESYNC_LOG_OUTPUT,
            'log_directory': self.SITESYNC_LOGS_DIRECTORY,
        }

    def get_logfile_path(self, node_id: str) -> str | None:
        if self.SITESYNC_LOGS_DIRECTORY is None:
            return None

        return os.path.join(self.SITESYNC_LOGS_DIRECTORY, f"{node_id}.json")

    @property
    def concurrency_wait_timeout(self) -> float:
        return TimeParser(self.SITESYNC_CONCURRENCY_WAIT_TIMEOUT).time

    @property
    def broadcast_delivery_timeout(self) -> float:
        return TimeParser(self.SITESYNC_BROADCAST_DELIVERY_TIMEOUT).time
