from __future__ import annotations

from typing import TYPE_CHECKING

from sitesync.errors import BroadcastError
from sitesync.logging import LogLevel
from sitesync.models import CommandMessage

from .job_runner import JobRunner
from .task_pipeline import Step

if TYPE_CHECKING:
    from sitesync.cluster.command_broadcaster import CommandBroadcaster


class ClusterJobRunner(JobRunner):
    """
    JobRunner whose initiator phase can announce work to the cluster.

    The command task publishes and returns as soon as deliveries are
    scheduled. It never waits for members to finish their worker tasks.
    """

    def __init__(
        self,
        resource: str,
        broadcaster: CommandBroadcaster | None = None,
        **kwargs,
    ) -> None:
        super().__init__(resource, **kwargs)
        self._broadcaster = broadcaster

    def create_command_task(
        self,
        command: str,
        payload: dict[str, str],
    ) -> Step:

        async def command_task() -> CommandMessage:
            try:
                if self._broadcaster is None:
                    raise BroadcastError(command, "no broadcaster configured")

                message = await self._broadcaster.publish(
                    command,
                    payload,
                    job_id=self.get_id(),
                )

            except BroadcastError as err:
                await self.on_broadcast_failed(command, err)
                raise

            except Exception as err:
                broadcast_error = BroadcastError(command, str(err))
                await self.on_broadcast_failed(command, broadcast_error)
                raise broadcast_error from err

            await self.log(
                f"Published {command} as message {message.message_id}",
                level=LogLevel.DEBUG,
            )

            return message

        return command_task

    async def on_broadcast_failed(
        self,
        command: str,
        err: BroadcastError,
    ) -> None:
        await self.log_error(err)
