#!/usr/bin/env python3
"""
Pipelines of processes connected stdout to stdin.

Every stage is launched when it is constructed, so all stages of a pipeline
run concurrently and a producer never blocks forever on a full pipe while
its consumer has not started yet.
"""

import logging
from typing import Any, Iterable, Optional, Tuple, Type

from . import projection
from .errors import InvalidArgument
from .process import CommandResult, ProcessHandle

logger = logging.getLogger(__name__)


class Pipeline:
    """
    An ordered chain of ProcessHandles.

    The result of a pipeline is the CommandResult of its last stage. Earlier
    stages pass through: their exit codes are only visible by awaiting
    ``stages[i]`` directly.
    """

    def __init__(self, stages: Iterable[ProcessHandle], throw_on_error: bool = True,
                 encoding: str = 'utf-8'):
        self._stages: Tuple[ProcessHandle, ...] = tuple(stages)
        if not self._stages:
            raise InvalidArgument("a pipeline needs at least one stage")
        self._throw_on_error = bool(throw_on_error)
        self.encoding = encoding

    @property
    def stages(self) -> Tuple[ProcessHandle, ...]:
        return self._stages

    @property
    def first(self) -> ProcessHandle:
        return self._stages[0]

    @property
    def last(self) -> ProcessHandle:
        return self._stages[-1]

    @property
    def throw_on_error(self) -> bool:
        """Failure policy captured from the session when this pipeline was built."""
        return self._throw_on_error

    @property
    def working_directory(self) -> str:
        return self.last.working_directory

    # Composition

    def pipe(self, other: 'Pipeline') -> 'Pipeline':
        """Feed this pipeline's output into ``other``.

        Returns a new pipeline holding the stages of both, with the failure
        policy of ``other``.

        Raises:
            TypeError: If ``other`` is neither a Pipeline nor a ProcessHandle.
        """
        if isinstance(other, ProcessHandle):
            other = Pipeline([other], self._throw_on_error, self.encoding)
        if not isinstance(other, Pipeline):
            raise TypeError(f"cannot pipe into {type(other).__name__}")

        self.last.pipe_to(other.first)
        logger.debug("piped %s into %s", self.last.executable, other.first.executable)
        return Pipeline(self._stages + other.stages, other.throw_on_error, other.encoding)

    def __or__(self, other: 'Pipeline') -> 'Pipeline':
        if not isinstance(other, (Pipeline, ProcessHandle)):
            return NotImplemented
        return self.pipe(other)

    def redirect_from(self, content: str) -> 'Pipeline':
        """Use ``content`` as the input of the first stage."""
        self.first.feed(content)
        return self

    # Completion and cancellation

    def kill(self) -> None:
        """Kill every stage that is still running."""
        for stage in self._stages:
            stage.kill()

    @property
    def has_exited(self) -> bool:
        return all(stage.has_exited for stage in self._stages)

    async def wait(self) -> CommandResult:
        """Wait for the last stage and return its result."""
        self.first.close_stdin()
        return await self.last.wait()

    def __await__(self):
        return self.wait().__await__()

    # Projections

    async def as_result(self, log: bool = False) -> CommandResult:
        return await projection.as_result(self, log)

    async def as_string(self, log: bool = False) -> str:
        return await projection.as_string(self, log)

    async def as_json(self, target: Optional[Type] = None) -> Any:
        return await projection.as_json(self, target)

    async def as_xml(self, target: Optional[Type] = None) -> Any:
        return await projection.as_xml(self, target)

    async def as_file(self, stdout_path: str, stderr_path: Optional[str] = None) -> CommandResult:
        return await projection.as_file(self, stdout_path, stderr_path)

    def __str__(self) -> str:
        return ' | '.join(stage.command_line for stage in self._stages)

    def __repr__(self) -> str:
        return f"Pipeline({str(self)!r})"
