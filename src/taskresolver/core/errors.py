"""Exception taxonomy for taskresolver.

Three families of errors exist:

- Registration errors are raised synchronously by ``Resolver.register``
  and leave the registry untouched.
- Structural errors fail a whole resolution stream before any task runs.
- Task execution errors are never raised by the engine. They are stored
  inside a ``Failure`` result when the engine itself has to describe why a
  task produced no value.
"""

from __future__ import annotations

from collections.abc import Sequence


class ResolverError(Exception):
    """Base class for all taskresolver errors."""


# Registration


class RegistrationError(ResolverError, ValueError):
    """A task could not be registered."""


class InvalidTaskIdError(RegistrationError):
    """Task id is not a usable identifier."""


class DuplicateTaskIdError(RegistrationError):
    """A task with the same id is already registered."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task with id '{task_id}' has already been registered")


class UnknownDependencyError(RegistrationError):
    """A declared dependency is not registered yet."""

    def __init__(self, task_id: str, missing: Sequence[str]) -> None:
        self.task_id = task_id
        self.missing = tuple(missing)
        missing_str = ", ".join(f"'{m}'" for m in self.missing)
        super().__init__(
            f"Task with id '{task_id}' has dependencies that have not been registered: "
            f"{missing_str}"
        )


# Structural


class GraphStructureError(ResolverError, RuntimeError):
    """The task graph cannot be resolved at all."""


class MaxIterationsReachedError(GraphStructureError):
    """Resolution needs more waves than the configured ceiling."""

    def __init__(self, max_iterations: int) -> None:
        self.max_iterations = max_iterations
        super().__init__(f"Max iterations reached ({max_iterations})")


class CycleDetectedError(GraphStructureError):
    """The task graph contains a dependency cycle."""

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = tuple(cycle)
        super().__init__(f"Cycle detected: {' -> '.join(self.cycle)}")


# Task execution (stored in Failure results)


class TaskExecutionError(ResolverError):
    """Engine-side reason for a task failure."""

    def __init__(self, task_id: str, message: str) -> None:
        self.task_id = task_id
        super().__init__(message)


class EmptyStreamError(TaskExecutionError):
    """A task returned an async stream that finished without a value."""

    def __init__(self, task_id: str) -> None:
        super().__init__(task_id, f"Task '{task_id}' returned a stream that emitted no value")


class TaskCancelledError(TaskExecutionError):
    """A task cancelled itself while the resolution was still running."""

    def __init__(self, task_id: str) -> None:
        super().__init__(task_id, f"Task '{task_id}' was cancelled")


# Deferred


class DeferredAlreadySuppliedError(ResolverError, RuntimeError):
    """A deferred value was supplied more than once."""
