"""Task descriptor and graph node."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from taskresolver.core.types import TaskResult

# fn(producer_results, global_args) -> value | awaitable | async iterable
TaskFn = Callable[[dict[str, TaskResult], Any], Any]


@dataclass(frozen=True)
class Task:
    """A unit of work registered with a Resolver.

    Tasks are pure - they just wrap a callable with metadata.

    The function receives a dict with the results of its producers, keyed
    by task ID, and the global arguments of the resolution. It may return
    a plain value, an awaitable, or an async iterable (only the first item
    is used).

    Attributes:
        id: Unique identifier for this task.
        fn: Function that performs the task.
        name: Optional human-readable name.
        metadata: Optional additional metadata.

    Example:
        >>> task = Task(
        ...     id="posts",
        ...     fn=lambda deps, g: fetch_posts(deps["user"].data["id"]),
        ...     name="Fetch posts of the user",
        ... )
    """

    id: str
    fn: TaskFn
    name: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self) -> None:
        if not callable(self.fn):
            raise TypeError(f"Task '{self.id}' fn must be callable")

    def __hash__(self) -> int:
        return hash(self.id)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Task):
            return self.id == other.id
        return False


@dataclass
class TaskNode:
    """A registered task with its place in the graph.

    Attributes:
        task: The task descriptor.
        producers: IDs this task depends on, fixed at registration.
        consumers: IDs that depend on this task, appended by later registrations.
    """

    task: Task
    producers: tuple[str, ...] = ()
    consumers: list[str] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.task.id

    @property
    def is_root(self) -> bool:
        """Whether the task has no producers."""
        return not self.producers

    def __repr__(self) -> str:
        return (
            f"TaskNode(id={self.id!r}, producers={list(self.producers)}, "
            f"consumers={self.consumers})"
        )
