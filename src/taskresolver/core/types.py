"""Pure data types for taskresolver.core.

These are simple dataclasses with no behavior coupling. A task outcome is
either ``Success`` or ``Failure``; a resolution emits an optional
``LoadingState`` marker followed by a single ``ResolutionResult``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Generic, TypeGuard, TypeVar

T = TypeVar("T")


class ResolutionState(Enum):
    """Resolution lifecycle states."""

    PENDING = "pending"  # Created, not iterated yet
    RUNNING = "running"  # Task units in flight
    COMPLETED = "completed"  # Terminal result delivered
    FAILED = "failed"  # Structural error raised
    CANCELLED = "cancelled"  # Closed before the terminal result


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful task outcome.

    Attributes:
        data: The value produced by the task.
    """

    data: T

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"data": self.data}


@dataclass(frozen=True)
class Failure:
    """Failed task outcome.

    Attributes:
        error: The exception raised (or signaled) by the task.
    """

    error: BaseException

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, rendering the error as text."""
        return {"error": f"{type(self.error).__name__}: {self.error}"}

    def __repr__(self) -> str:
        return f"Failure(error={self.error!r})"


TaskResult = Success[Any] | Failure


@dataclass(frozen=True)
class LoadingState:
    """Marker emitted before the terminal result when loading state is requested."""

    loading: bool = True


LOADING = LoadingState()


def _freeze(tasks: Mapping[str, TaskResult]) -> Mapping[str, TaskResult]:
    return MappingProxyType(dict(tasks))


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of one end-to-end resolution.

    Attributes:
        tasks: Read-only mapping of task id to its result, in registration order.
        global_args: Global arguments that were in effect for this resolution.
        has_errors: True if at least one task result is a Failure.
    """

    tasks: Mapping[str, TaskResult] = field(default_factory=dict)
    global_args: Any = None
    has_errors: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "tasks", _freeze(self.tasks))

    @classmethod
    def from_tasks(
        cls, tasks: Mapping[str, TaskResult], global_args: Any = None
    ) -> ResolutionResult:
        """Build a result, deriving has_errors from the task results."""
        return cls(
            tasks=tasks,
            global_args=global_args,
            has_errors=not has_no_errors(tasks),
        )

    def __getitem__(self, task_id: str) -> TaskResult:
        return self.tasks[task_id]

    def get(self, task_id: str) -> TaskResult | None:
        """Get a task result by id, or None if the task is unknown."""
        return self.tasks.get(task_id)

    @property
    def errors(self) -> dict[str, BaseException]:
        """Errors of the failed tasks, keyed by task id."""
        return {tid: r.error for tid, r in self.tasks.items() if isinstance(r, Failure)}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dict with global_args, per-task results and has_errors.
        """
        return {
            "global_args": self.global_args,
            "tasks": {tid: r.to_dict() for tid, r in self.tasks.items()},
            "has_errors": self.has_errors,
        }

    def __repr__(self) -> str:
        """Compact representation for REPL display."""
        ok = sum(1 for r in self.tasks.values() if isinstance(r, Success))
        failed = len(self.tasks) - ok
        return (
            f"ResolutionResult(tasks={len(self.tasks)}, ok={ok}, failed={failed}, "
            f"global_args={self.global_args!r})"
        )


# Discriminators


def is_success(result: TaskResult) -> TypeGuard[Success[Any]]:
    """Check if a task result holds data."""
    return isinstance(result, Success)


def is_error(result: TaskResult) -> TypeGuard[Failure]:
    """Check if a task result holds an error."""
    return isinstance(result, Failure)


def is_loading(value: object) -> TypeGuard[LoadingState]:
    """Check if a stream value is the loading marker.

    Only meaningful on resolutions started with ``with_loading_state=True``.
    """
    return isinstance(value, LoadingState) and value.loading


def has_no_errors(tasks: Mapping[str, TaskResult]) -> bool:
    """Check that every task result in the mapping is a success."""
    return all(is_success(result) for result in tasks.values())
