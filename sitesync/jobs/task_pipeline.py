"""
Task Pipeline - Sequential execution of fallible job steps.

A step is a zero-argument coroutine function. A step that returns has
succeeded with its return value; a step that raises has failed with the
raised exception. The pipeline stops at the first failure and reports it
through a PipelineResult instead of re-raising, so callers branch on
result.success rather than wrapping every run in try/except.

Progress is coarse: after every successful step the progress callback is
awaited with 100 / total_steps, regardless of how much work the step did.
"""

from typing import Any, Awaitable, Callable

from sitesync.models import PipelineResult


Step = Callable[[], Awaitable[Any]]
ProgressCallback = Callable[[float], Awaitable[None]]


class TaskPipeline:
    """Runs an ordered list of steps, short-circuiting on the first error."""

    def __init__(
        self,
        steps: list[Step],
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self._steps = list(steps)
        self._on_progress = on_progress

    @property
    def total_steps(self) -> int:
        return len(self._steps)

    @property
    def increment(self) -> float:
        if not self._steps:
            return 0.0

        return 100 / len(self._steps)

    async def run(self) -> PipelineResult:
        results: list[Any] = []

        for step in self._steps:
            try:
                result = await step()

            except Exception as err:
                return PipelineResult(
                    error=err,
                    results=results,
                    completed_steps=len(results),
                    total_steps=self.total_steps,
                )

            results.append(result)

            if self._on_progress:
                await self._on_progress(self.increment)

        return PipelineResult(
            results=results,
            completed_steps=len(results),
            total_steps=self.total_steps,
        )
