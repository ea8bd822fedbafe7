"""
Command Bus - In-process fan-out transport between cluster members.

Each joined member registers a receive coroutine. fan_out() schedules one
independent delivery task per member and returns without waiting, so a
slow or failing member never holds up the publisher or the other members.
Delivery order across members is not defined.
"""

import asyncio
from typing import Awaitable, Callable

from sitesync.logging import Logger
from sitesync.models import Error

from .logging_models import BroadcasterError, BroadcasterWarning


Receiver = Callable[[bytes], Awaitable[None]]


class CommandBus:

    def __init__(
        self,
        delivery_timeout: float | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._receivers: dict[str, Receiver] = {}
        self._deliveries: set[asyncio.Task] = set()
        self._delivery_timeout = delivery_timeout
        self._logger = logger or Logger()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def join(self, node_id: str, receive: Receiver) -> None:
        self._receivers[node_id] = receive

    def leave(self, node_id: str) -> None:
        self._receivers.pop(node_id, None)

    def members(self) -> list[str]:
        return list(self._receivers)

    def is_member(self, node_id: str) -> bool:
        return node_id in self._receivers

    def fan_out(
        self,
        data: bytes,
        command: str = "",
        job_id: str = "",
        message_id: str = "",
    ) -> int:
        """
        Schedule delivery of data to every current member.

        Returns:
            The number of members a delivery was scheduled for
        """
        receivers = list(self._receivers.items())

        for node_id, receive in receivers:
            task = asyncio.create_task(
                self._deliver(
                    node_id,
                    receive,
                    data,
                    command=command,
                    job_id=job_id,
                    message_id=message_id,
                )
            )

            self._deliveries.add(task)
            task.add_done_callback(self._deliveries.discard)

        return len(receivers)

    async def _deliver(
        self,
        node_id: str,
        receive: Receiver,
        data: bytes,
        command: str = "",
        job_id: str = "",
        message_id: str = "",
    ) -> None:
        try:
            await asyncio.wait_for(
                receive(data),
                timeout=self._delivery_timeout,
            )

        except asyncio.TimeoutError:
            await self._logger.log(BroadcasterWarning(
                message=f"Delivery of {command} to {node_id} timed out after {self._delivery_timeout}s",
                node_id=node_id,
                command=command,
                job_id=job_id,
                message_id=message_id,
            ))

        except Exception as err:
            await self._logger.log(BroadcasterError(
                message=f"Delivery of {command} to {node_id} failed: {err}",
                node_id=node_id,
                command=command,
                job_id=job_id,
                message_id=message_id,
                traceback=Error.from_exception(err, node_id).traceback,
            ))

    @property
    def pending_deliveries(self) -> int:
        return len(self._deliveries)

    async def wait_for_deliveries(self) -> None:
        """Wait until every scheduled delivery, including ones scheduled meanwhile, is done."""
        while self._deliveries:
            await asyncio.gather(
                *list(self._deliveries),
                return_exceptions=True,
            )

    async def close(self) -> None:
        self._closed = True
        await self.wait_for_deliveries()
        self._receivers.clear()
