"""DAG task resolution.

Pure graph execution - no persistence, no retries, no server awareness.
Just tasks, dependencies, and execution.

Classes:
    Resolver: Registry of tasks and entry point for resolution.
    Resolution: Lazy async stream of one end-to-end execution.
    Task: A single task in the graph.
    TaskNode: A registered task with its producers and consumers.

Example:
    >>> from taskresolver.core.dag import Resolver, Task
    >>> from taskresolver.core.types import is_success
    >>>
    >>> resolver = Resolver()
    >>> resolver.register(Task(id="a", fn=lambda deps, g: 1))
    >>> resolver.register(Task(id="b", fn=lambda deps, g: 2))
    >>> resolver.register(
    ...     Task(id="sum", fn=lambda deps, g: deps["a"].data + deps["b"].data),
    ...     ["a", "b"],
    ... )
    >>>
    >>> result = await resolver.run()
    >>> print(result.tasks["sum"].data)
    3
"""

from taskresolver.core.dag.graph import Resolver
from taskresolver.core.dag.resolution import Resolution
from taskresolver.core.dag.task import Task, TaskNode

__all__ = ["Resolver", "Resolution", "Task", "TaskNode"]
