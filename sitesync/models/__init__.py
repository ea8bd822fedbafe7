from .commands import CommandMessage as CommandMessage
from .error import Error as Error
from .jobs import (
    JobInfo as JobInfo,
    JobStatus as JobStatus,
    PipelineResult as PipelineResult,
)
from .message import Message as Message
from .sites import SiteRecord as SiteRecord
