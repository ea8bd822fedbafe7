"""
Command Broadcaster - A member's endpoint on the command bus.

publish() encodes a CommandMessage and hands it to the bus for delivery
to every member, this one included. It is fire-and-forget: it returns
once deliveries are scheduled and never retries or waits for handlers.

receive() is what the bus calls on delivery. It decodes the message and
awaits the handlers registered with on_command(). Handler failures are
logged on this member and go no further.
"""

from collections import defaultdict, deque
from typing import Awaitable, Callable

import msgspec
import orjson

from sitesync.errors import BroadcastError
from sitesync.logging import Logger
from sitesync.models import CommandMessage, Error

from .command_bus import CommandBus
from .logging_models import BroadcasterDebug, BroadcasterError, BroadcasterWarning


CommandHandler = Callable[[CommandMessage], Awaitable[None]]


class CommandBroadcaster:

    def __init__(
        self,
        node_id: str,
        bus: CommandBus,
        logger: Logger | None = None,
        history_size: int = 1000,
    ) -> None:
        self._node_id = node_id
        self._bus = bus
        self._logger = logger or Logger()
        self._handlers: dict[str, list[CommandHandler]] = defaultdict(list)
        self.received: deque[CommandMessage] = deque(maxlen=history_size)

    @property
    def node_id(self) -> str:
        return self._node_id

    @property
    def connected(self) -> bool:
        return self._bus.is_member(self._node_id)

    def connect(self) -> None:
        self._bus.join(self._node_id, self.receive)

    def disconnect(self) -> None:
        self._bus.leave(self._node_id)

    def on_command(
        self,
        command_name: str,
        handler: CommandHandler,
    ) -> None:
        self._handlers[command_name].append(handler)

    async def publish(
        self,
        command_name: str,
        payload: dict[str, str],
        job_id: str | None = None,
    ) -> CommandMessage:
        if self._bus.closed:
            raise BroadcastError(command_name, "command bus is closed")

        if not self.connected:
            raise BroadcastError(command_name, f"member {self._node_id} has not joined the cluster")

        try:
            payload = msgspec.convert(payload, type=dict[str, str])

        except msgspec.ValidationError as err:
            raise BroadcastError(command_name, f"invalid payload: {err}") from err

        if job_id is None:
            job_id = payload.get("job_id", "")

        message = CommandMessage(
            command=command_name,
            job_id=job_id,
            payload=payload,
            origin=self._node_id,
        )

        try:
            data = message.dump()

        except (TypeError, orjson.JSONEncodeError) as err:
            raise BroadcastError(command_name, f"could not encode message: {err}") from err

        member_count = self._bus.fan_out(
            data,
            command=command_name,
            job_id=job_id,
            message_id=message.message_id,
        )

        await self._logger.log(BroadcasterDebug(
            message=f"Published {command_name} to {member_count} members",
            node_id=self._node_id,
            command=command_name,
            job_id=job_id,
            message_id=message.message_id,
        ))

        return message

    async def receive(self, data: bytes) -> None:
        try:
            message = CommandMessage.load(data)

        except (orjson.JSONDecodeError, msgspec.ValidationError) as err:
            await self._logger.log(BroadcasterError(
                message=f"Dropped undecodable command: {err}",
                node_id=self._node_id,
                command="",
                job_id="",
                message_id="",
                traceback=Error.from_exception(err, self._node_id).traceback,
            ))

            return

        self.received.append(message)

        handlers = self._handlers.get(message.command)
        if not handlers:
            await self._logger.log(BroadcasterWarning(
                message=f"No handler registered for {message.command}",
                node_id=self._node_id,
                command=message.command,
                job_id=message.job_id,
                message_id=message.message_id,
            ))

            return

        for handler in list(handlers):
            try:
                await handler(message)

            except Exception as err:
                await self._logger.log(BroadcasterError(
                    message=f"Handler for {message.command} failed: {err}",
                    node_id=self._node_id,
                    command=message.command,
                    job_id=message.job_id,
                    message_id=message.message_id,
                    traceback=Error.from_exception(err, self._node_id).traceback,
                ))
