"""Resolver - task registry and graph resolution."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from graphlib import CycleError, TopologicalSorter
from typing import Any

from taskresolver.core.config import ResolverConfig, validate_max_iterations
from taskresolver.core.dag.resolution import (
    UNSET,
    Resolution,
    TaskCompleteCallback,
    TaskStartCallback,
)
from taskresolver.core.dag.task import Task, TaskNode
from taskresolver.core.errors import (
    CycleDetectedError,
    DuplicateTaskIdError,
    MaxIterationsReachedError,
    UnknownDependencyError,
)
from taskresolver.core.types import ResolutionResult
from taskresolver.core.validation import validate_task_id

logger = logging.getLogger(__name__)


class Resolver:
    """Dependency-aware task executor.

    Tasks are registered with the IDs of the tasks they depend on. Every
    dependency must be registered first, so the graph is built
    incrementally. Resolving runs every task once: independent tasks run
    concurrently and a task starts as soon as all of its producers have a
    result, successful or not.

    Doesn't know about:
    - Persistence (graph and results live in memory)
    - Retries (a failed task is reported once)

    Example:
        >>> resolver = Resolver()
        >>>
        >>> resolver.register(Task(id="user", fn=lambda deps, g: fetch_user()))
        >>> resolver.register(
        ...     Task(id="posts", fn=lambda deps, g: fetch_posts(deps["user"].data)),
        ...     ["user"],
        ... )
        >>>
        >>> # Last value only
        >>> result = await resolver.run()
        >>> result.tasks["posts"]
        >>>
        >>> # Stream with loading marker
        >>> async for value in resolver.resolve(with_loading_state=True):
        ...     print(value)
    """

    def __init__(self, global_args: Any = None, config: ResolverConfig | None = None) -> None:
        """Create a resolver.

        Args:
            global_args: Value passed to every task function as its second
                argument.
            config: Defaults for resolve() options.
        """
        self._nodes: dict[str, TaskNode] = {}
        self._global_args = global_args
        self._config = config or ResolverConfig()

    @property
    def config(self) -> ResolverConfig:
        """Resolution defaults."""
        return self._config

    @property
    def global_args(self) -> Any:
        """Stored global arguments."""
        return self._global_args

    def set_global_args(self, global_args: Any) -> None:
        """Replace the stored global arguments.

        Only resolutions that start afterwards see the new value.

        Args:
            global_args: New global arguments.
        """
        self._global_args = global_args

    def register(self, task: Task, dependencies: Iterable[str] | None = None) -> Resolver:
        """Register a task.

        Args:
            task: The task to add.
            dependencies: IDs of already registered tasks this task depends on.

        Returns:
            Self for chaining.

        Raises:
            InvalidTaskIdError: If the task id is not usable.
            TypeError: If dependencies is a single string.
            DuplicateTaskIdError: If the id is already registered.
            UnknownDependencyError: If a dependency is not registered.
        """
        validate_task_id(task.id)
        if isinstance(dependencies, str):
            raise TypeError("dependencies must be a list of task IDs, not a string")

        if task.id in self._nodes:
            raise DuplicateTaskIdError(task.id)

        producers = tuple(dict.fromkeys(dependencies or ()))
        missing = [dep for dep in producers if dep not in self._nodes]
        if missing:
            raise UnknownDependencyError(task.id, missing)

        self._nodes[task.id] = TaskNode(task=task, producers=producers)
        for producer_id in producers:
            self._nodes[producer_id].consumers.append(task.id)

        logger.debug("task_registered: task_id=%s, producers=%s", task.id, list(producers))
        return self

    def get_task(self, task_id: str) -> Task | None:
        """Get a task by ID.

        Args:
            task_id: The task ID.

        Returns:
            The task, or None if not found.
        """
        node = self._nodes.get(task_id)
        return node.task if node else None

    def get_node(self, task_id: str) -> TaskNode | None:
        """Get a task with its producers and consumers."""
        return self._nodes.get(task_id)

    def list_tasks(self) -> list[str]:
        """List all task IDs in registration order."""
        return list(self._nodes.keys())

    def snapshot(self) -> dict[str, TaskNode]:
        """Copy of the registry, in registration order."""
        return dict(self._nodes)

    def execution_waves(self, max_iterations: int | None = None) -> list[list[str]]:
        """Group tasks into waves of tasks whose producers are all in earlier waves.

        Args:
            max_iterations: Maximum number of waves. Defaults to the config.

        Returns:
            List of waves, each in registration order.

        Raises:
            CycleDetectedError: If the graph has a cycle.
            MaxIterationsReachedError: If more waves than allowed are needed.
        """
        ceiling = validate_max_iterations(
            self._config.max_iterations if max_iterations is None else max_iterations
        )
        position = {task_id: i for i, task_id in enumerate(self._nodes)}

        sorter = TopologicalSorter({n.id: n.producers for n in self._nodes.values()})
        try:
            sorter.prepare()
        except CycleError as e:
            raise CycleDetectedError(e.args[1]) from e

        waves: list[list[str]] = []
        while sorter.is_active():
            if len(waves) >= ceiling:
                raise MaxIterationsReachedError(ceiling)
            ready = sorted(sorter.get_ready(), key=position.__getitem__)
            waves.append(ready)
            sorter.done(*ready)

        return waves

    def resolve(
        self,
        *,
        global_args: Any = UNSET,
        with_loading_state: bool | None = None,
        max_iterations: int | None = None,
        on_task_start: TaskStartCallback | None = None,
        on_task_complete: TaskCompleteCallback | None = None,
    ) -> Resolution:
        """Create a lazy resolution of every registered task.

        Nothing runs until the returned stream is iterated.

        Args:
            global_args: One-shot override of the stored global arguments,
                ``None`` included. Never stored.
            with_loading_state: Emit a loading marker before the result.
                Defaults to the config.
            max_iterations: Wave ceiling. Defaults to the config.
            on_task_start: Called with the task ID right before a task runs.
            on_task_complete: Called with the task ID and its result.

        Returns:
            The resolution stream.

        Raises:
            ValueError: If max_iterations is not a positive int.
        """
        if with_loading_state is None:
            with_loading_state = self._config.with_loading_state
        if max_iterations is None:
            max_iterations = self._config.max_iterations
        validate_max_iterations(max_iterations)

        return Resolution(
            self,
            global_args=global_args,
            with_loading_state=with_loading_state,
            max_iterations=max_iterations,
            on_task_start=on_task_start,
            on_task_complete=on_task_complete,
        )

    async def run(
        self,
        *,
        global_args: Any = UNSET,
        max_iterations: int | None = None,
        on_task_start: TaskStartCallback | None = None,
        on_task_complete: TaskCompleteCallback | None = None,
    ) -> ResolutionResult:
        """Resolve every task and return the terminal result.

        Args:
            global_args: One-shot override of the stored global arguments.
            max_iterations: Wave ceiling. Defaults to the config.
            on_task_start: Called with the task ID right before a task runs.
            on_task_complete: Called with the task ID and its result.

        Returns:
            Results of every task.

        Raises:
            GraphStructureError: If the graph cannot be resolved.
        """
        resolution = self.resolve(
            global_args=global_args,
            with_loading_state=False,
            max_iterations=max_iterations,
            on_task_start=on_task_start,
            on_task_complete=on_task_complete,
        )
        return await resolution.collect()

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._nodes

    def __repr__(self) -> str:
        return f"Resolver({list(self._nodes.keys())})"
