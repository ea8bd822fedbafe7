"""
Job Registry - Maps job type tags and cluster commands to job classes.

Members look up the job class for a delivered command here and build a
worker-side instance from the command payload. Coordinators look up the
class for a submitted job type tag.
"""

from dataclasses import dataclass

from sitesync.errors import UnknownJobTypeError

from .site_activate_job import SiteActivateJob
from .site_deactivate_job import SiteDeactivateJob
from .site_job_runner import SiteJobRunner


@dataclass(frozen=True, slots=True)
class JobType:
    tag: str
    command: str
    job_class: type[SiteJobRunner]


class JobRegistry:

    def __init__(self) -> None:
        self._by_tag: dict[str, JobType] = {}
        self._by_command: dict[str, JobType] = {}

    def register(self, job_class: type[SiteJobRunner]) -> type[SiteJobRunner]:
        tag = job_class.job_type
        command = job_class.command

        if not command:
            raise ValueError(f"Job class {job_class.__name__} does not declare a command")

        if (existing := self._by_command.get(command)) and existing.tag != tag:
            raise ValueError(
                f"Command {command} is already handled by job type {existing.tag}"
            )

        job_type = JobType(
            tag=tag,
            command=command,
            job_class=job_class,
        )

        self._by_tag[tag] = job_type
        self._by_command[command] = job_type

        return job_class

    def get(self, tag: str) -> JobType:
        if (job_type := self._by_tag.get(tag)) is None:
            raise UnknownJobTypeError(f"No job registered for type {tag}")

        return job_type

    def for_command(self, command: str) -> JobType:
        if (job_type := self._by_command.get(command)) is None:
            raise UnknownJobTypeError(f"No job registered for command {command}")

        return job_type

    def commands(self) -> list[str]:
        return list(self._by_command)

    def __iter__(self):
        return iter(list(self._by_tag.values()))

    def __contains__(self, tag: str) -> bool:
        return tag in self._by_tag

    def __len__(self) -> int:
        return len(self._by_tag)


def create_default_registry() -> JobRegistry:
    registry = JobRegistry()
    registry.register(SiteActivateJob)
    registry.register(SiteDeactivateJob)

    return registry
