"""
Tests for the structured logger.

Tests cover:
1. File output: JSON lines carrying the entry and its call site
2. Stream output: Template rendering to stderr
3. Filtering: Level threshold and disabled loggers
"""

import orjson
import pytest

from sitesync.jobs import JobRunnerDebug, JobRunnerInfo
from sitesync.logging import Log, LoggerContext, LoggingConfig, Logger, LoggerStream, LogLevel


def make_entry(entry_type=JobRunnerInfo, message="Job job-1 succeeded"):
    return entry_type(
        message=message,
        node_id="node-a",
        job_id="job-1",
        job_type="site_activate",
        site="site-42",
    )


class TestLogLevel:

    @pytest.mark.parametrize(
        "name,level",
        [
            ("debug", LogLevel.DEBUG),
            ("WARN", LogLevel.WARN),
            ("error", LogLevel.ERROR),
            ("verbose", LogLevel.INFO),
        ],
    )
    def test_to_level(self, name, level):
        assert LogLevel.to_level(name) == level


class TestEntry:

    def test_to_template(self):
        entry = make_entry()

        line = entry.to_template(
            "{level} [{node_id}] {site}: {message} ({timestamp})",
            context={"timestamp": "now"},
        )

        assert line == "INFO [node-a] site-42: Job job-1 succeeded (now)"


class TestLogger:

    @pytest.mark.asyncio
    async def test_writes_json_lines_to_file(self, tmp_path):
        logfile = tmp_path / "node-a.json"

        logger = Logger()
        logger.configure(path=str(logfile))

        await logger.log(make_entry())
        await logger.log(make_entry(message="Job job-2 succeeded"))
        await logger.close()

        lines = logfile.read_bytes().splitlines()
        assert len(lines) == 2

        record = orjson.loads(lines[0])
        assert record["entry"]["message"] == "Job job-1 succeeded"
        assert record["entry"]["level"] == "INFO"
        assert record["entry"]["site"] == "site-42"
        assert record["function_name"] == "test_writes_json_lines_to_file"

    @pytest.mark.asyncio
    async def test_batch_writes_every_entry(self, tmp_path):
        logfile = tmp_path / "batch.json"

        logger = Logger()
        logger.configure(path=str(logfile))

        await logger.batch(
            make_entry(message="first"),
            make_entry(message="second"),
        )
        await logger.close()

        messages = [
            orjson.loads(line)["entry"]["message"]
            for line in logfile.read_bytes().splitlines()
        ]
        assert messages == ["first", "second"]

    @pytest.mark.asyncio
    async def test_writes_template_to_stderr(self, capsys):
        logger = Logger()

        await logger.log(
            make_entry(),
            template="{level} {node_id} {message}",
        )
        await logger.close()

        assert "INFO node-a Job job-1 succeeded" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_entries_below_level_are_dropped(self, tmp_path):
        logfile = tmp_path / "filtered.json"

        logger = Logger()
        logger.configure(path=str(logfile))

        await logger.log(make_entry(JobRunnerDebug, message="debug detail"))
        await logger.log(make_entry())
        await logger.close()

        lines = logfile.read_bytes().splitlines()
        assert len(lines) == 1
        assert orjson.loads(lines[0])["entry"]["level"] == "INFO"

    @pytest.mark.asyncio
    async def test_disabled_logger_writes_nothing(self, capsys):
        config = LoggingConfig()
        config.update(disabled_loggers=["default"])

        try:
            logger = Logger()
            await logger.log(make_entry(), template="{message}")
            await logger.close()

        finally:
            config.update(disabled_loggers=[])

        assert "Job job-1 succeeded" not in capsys.readouterr().err


    @pytest.mark.asyncio
    async def test_reopens_file_after_close(self, tmp_path):
        logfile = tmp_path / "reopen.json"

        logger = Logger()
        logger.configure(path=str(logfile))

        await logger.log(make_entry(message="before close"))
        await logger.close()
        await logger.log(make_entry(message="after close"))
        await logger.close()

        messages = [
            orjson.loads(line)["entry"]["message"]
            for line in logfile.read_bytes().splitlines()
        ]
        assert messages == ["before close", "after close"]


class TestLoggerStream:

    @pytest.mark.asyncio
    async def test_renders_log_fields(self, capsys):
        stream = LoggerStream(
            template="{timestamp} {thread_id} {filename}:{function_name}.{line_number} {message}",
        )

        await stream.log(
            Log(
                entry=make_entry(),
                filename="site_job.py",
                function_name="run",
                line_number=7,
                thread_id=99,
                timestamp="2026-10-19T00:00:00+00:00",
            ),
        )

        assert (
            "2026-10-19T00:00:00+00:00 99 site_job.py:run.7 Job job-1 succeeded"
            in capsys.readouterr().err
        )

    @pytest.mark.asyncio
    async def test_rejects_non_json_logfile(self, tmp_path):
        stream = LoggerStream(
            filename="node-a.log",
            directory=str(tmp_path),
        )

        with pytest.raises(ValueError):
            await stream.log(
                Log(
                    entry=make_entry(),
                    filename="site_job.py",
                    function_name="run",
                    line_number=7,
                ),
            )


class TestLoggerContext:

    @pytest.mark.asyncio
    async def test_top_level_context_closes_file(self, tmp_path):
        context = LoggerContext(
            filename="context.json",
            directory=str(tmp_path),
        )

        async with context as stream:
            await stream.log(
                Log(
                    entry=make_entry(),
                    filename="site_job.py",
                    function_name="run",
                    line_number=7,
                ),
            )

        assert all(logfile.closed for logfile in stream._files.values())
        assert len((tmp_path / "context.json").read_bytes().splitlines()) == 1


class TestLoggingConfig:

    def test_enabled_respects_level(self):
        config = LoggingConfig()

        assert config.level == LogLevel.INFO
        assert config.enabled("default", LogLevel.ERROR) is True
        assert config.enabled("default", LogLevel.DEBUG) is False
