import asyncio
import io
import os
import pathlib
import sys
from collections import defaultdict
from typing import Dict

import msgspec

from sitesync.logging.config import LoggingConfig, StreamType
from sitesync.logging.models import Log


DEFAULT_TEMPLATE = "{timestamp} - {level} - {thread_id} - {filename}:{function_name}.{line_number} - {message}"
DEFAULT_LOGFILE = "logs.json"


class LoggerStream:
    """
    Writes Logs for one named logger.

    Without a file or directory configured each Log is rendered through a
    template to stdout or stderr (per LoggingConfig.output). Otherwise Logs
    are appended as JSON lines to the stream's logfile, which is opened on
    first use and reopened if it was closed.
    """

    def __init__(
        self,
        name: str | None = None,
        template: str | None = None,
        filename: str | None = None,
        directory: str | None = None,
    ) -> None:
        if name is None:
            name = "default"

        self._name = name
        self._template = template
        self._filename = filename
        self._directory = directory

        self._init_lock = asyncio.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._cwd: str | None = None

        self._files: Dict[str, io.BufferedRandom] = {}
        self._file_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._logfile_path: str | None = None

        self._config = LoggingConfig()

    @property
    def writes_to_file(self) -> bool:
        return bool(self._filename or self._directory)

    async def initialize(self):
        async with self._init_lock:
            if self._loop is None:
                self._loop = asyncio.get_running_loop()

            if self._cwd is None:
                self._cwd = await self._loop.run_in_executor(
                    None,
                    os.getcwd,
                )

    async def log(
        self,
        log: Log,
        template: str | None = None,
    ):
        if self._config.enabled(self._name, log.entry.level) is False:
            return

        if self._loop is None:
            await self.initialize()

        if self.writes_to_file:
            await self._log_to_file(log)

        else:
            await self._log_to_stream(
                log,
                template=template,
            )

    async def close(self):
        await asyncio.gather(
            *[self._close_file(logfile_path) for logfile_path in self._files]
        )

    async def _log_to_stream(
        self,
        log: Log,
        template: str | None = None,
    ):
        if template is None:
            template = self._template or DEFAULT_TEMPLATE

        stream = sys.stdout if self._config.output == StreamType.STDOUT else sys.stderr

        line = log.entry.to_template(
            template,
            context={
                "filename": log.filename,
                "function_name": log.function_name,
                "line_number": log.line_number,
                "thread_id": log.thread_id,
                "timestamp": log.timestamp,
            },
        )

        await self._loop.run_in_executor(
            None,
            self._write_to_stream,
            stream,
            line,
        )

    def _write_to_stream(
        self,
        stream: io.TextIOBase,
        line: str,
    ):
        if stream.closed is False:
            stream.write(line + "\n")
            stream.flush()

    async def _log_to_file(self, log: Log):
        if self._logfile_path is None:
            self._logfile_path = self._to_logfile_path(
                self._filename or DEFAULT_LOGFILE,
                directory=self._directory,
            )

        logfile_path = self._logfile_path

        async with self._file_locks[logfile_path]:
            logfile = self._files.get(logfile_path)
            if logfile is None or logfile.closed:
                await self._loop.run_in_executor(
                    None,
                    self._open_file,
                    logfile_path,
                )

            await self._loop.run_in_executor(
                None,
                self._write_to_file,
                log,
                logfile_path,
            )

    def _to_logfile_path(
        self,
        filename: str,
        directory: str | None = None,
    ) -> str:
        if pathlib.Path(filename).suffix != ".json":
            raise ValueError(f"Logfile {filename} must be a .json file")

        if self._config.directory:
            directory = self._config.directory

        elif directory is None:
            directory = self._cwd

        return os.path.join(directory, filename)

    def _open_file(self, logfile_path: str):
        resolved_path = pathlib.Path(logfile_path).absolute().resolve()
        resolved_path.parent.mkdir(parents=True, exist_ok=True)

        self._files[logfile_path] = open(resolved_path, "ab+")

    def _write_to_file(
        self,
        log: Log,
        logfile_path: str,
    ):
        if (
            logfile := self._files.get(logfile_path)
        ) and (
            logfile.closed is False
        ):
            logfile.write(msgspec.json.encode(log) + b"\n")
            logfile.flush()

    async def _close_file(self, logfile_path: str):
        async with self._file_locks[logfile_path]:
            await self._loop.run_in_executor(
                None,
                self._close_file_at_path,
                logfile_path,
            )

    def _close_file_at_path(self, logfile_path: str):
        if (
            logfile := self._files.get(logfile_path)
        ) and logfile.closed is False:
            logfile.close()
