from __future__ import annotations

import asyncio
import pathlib
import sys
from types import FrameType
from typing import Dict

from sitesync.logging.models import Entry, Log

from .logger_context import LoggerContext


def _split_path(path: str | None):
    filename: str | None = None
    directory: str | None = None

    if path:
        logfile_path = pathlib.Path(path)
        is_logfile = len(logfile_path.suffix) > 0

        filename = logfile_path.name if is_logfile else None
        directory = str(logfile_path.parent.absolute()) if is_logfile else str(logfile_path.absolute())

    return filename, directory


def _to_log(entry: Entry, frame: FrameType) -> Log:
    code = frame.f_code

    return Log(
        entry=entry,
        filename=code.co_filename,
        function_name=code.co_name,
        line_number=frame.f_lineno,
    )


class Logger:
    """
    Async structured logger.

    Each name maps to a LoggerContext whose stream writes to stderr/stdout,
    or to a JSON lines file once configure() was given a path. Entries are
    wrapped in a Log carrying the caller's location.
    """

    def __init__(self) -> None:
        self._contexts: Dict[str, LoggerContext] = {}

    def configure(
        self,
        name: str | None = None,
        template: str | None = None,
        path: str | None = None,
    ):
        if name is None:
            name = 'default'

        filename, directory = _split_path(path)

        self._contexts[name] = LoggerContext(
            name=name,
            template=template,
            filename=filename,
            directory=directory,
            nested=True,
        )

    def context(self, name: str | None = None) -> LoggerContext:
        if name is None:
            name = 'default'

        if (context := self._contexts.get(name)) is None:
            context = LoggerContext(
                name=name,
                nested=True,
            )
            self._contexts[name] = context

        return context

    async def log(
        self,
        entry: Entry,
        name: str | None = None,
        template: str | None = None,
    ):
        frame = sys._getframe(1)

        async with self.context(name) as stream:
            await stream.log(
                _to_log(entry, frame),
                template=template,
            )

    async def batch(
        self,
        *entries: Entry,
        name: str | None = None,
    ):
        frame = sys._getframe(1)

        async with self.context(name) as stream:
            for entry in entries:
                await stream.log(_to_log(entry, frame))

    async def close(self):
        if len(self._contexts) > 0:
            await asyncio.gather(*[
                context.stream.close() for context in self._contexts.values()
            ])
