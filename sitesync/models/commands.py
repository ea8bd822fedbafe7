"""
Cluster command messages.

A command is published once by the coordinating member and delivered to
every member of the cluster, the publisher included. Payloads carry the
job id and the uid of the site the command refers to:

    CommandMessage(
        command="activate_site",
        job_id="job-1a2b3c",
        payload={"job_id": "job-1a2b3c", "site": "site-42"},
        origin="node-east-1",
    )
"""

import uuid

import msgspec

from .message import Message


class CommandMessage(Message, kw_only=True):
    command: str
    job_id: str
    payload: dict[str, str]
    origin: str
    message_id: str = msgspec.field(
        default_factory=lambda: uuid.uuid4().hex,
    )

    @property
    def site(self) -> str | None:
        return self.payload.get("site")
