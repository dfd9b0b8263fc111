"""taskresolver - dependency-aware async task executor.

Register named tasks with the IDs of the tasks they depend on, then
resolve the graph: independent tasks run concurrently on the event loop,
dependents wait for their producers, and every task reports either
``Success(data)`` or ``Failure(error)`` without aborting unrelated
branches.

Key Concepts:
    Task:       Unit of work, fn(producer_results, global_args)
    Resolver:   Registry and entry point (register, resolve, run)
    Resolution: Lazy async stream, optional loading marker then the result
    Global args:
                Value shared by every task, stored or overridden per call

Quick Start:
    >>> from taskresolver import Resolver, Task, is_success
    >>>
    >>> resolver = (
    ...     Resolver()
    ...     .register(Task(id="A", fn=lambda deps, g: 1))
    ...     .register(Task(id="B", fn=lambda deps, g: 2))
    ...     .register(
    ...         Task(id="C", fn=lambda deps, g: deps["A"].data + deps["B"].data),
    ...         ["A", "B"],
    ...     )
    ... )
    >>> result = await resolver.run()
    >>> result.tasks["C"]
    Success(data=3)
"""

from taskresolver.__version__ import __version__

# Re-export core for convenience
from taskresolver.core import (
    LOADING,
    CycleDetectedError,
    DuplicateTaskIdError,
    EmptyStreamError,
    Failure,
    GraphStructureError,
    LoadingState,
    MaxIterationsReachedError,
    Resolution,
    ResolutionResult,
    Resolver,
    ResolverConfig,
    ResolverError,
    Success,
    Task,
    TaskResult,
    UnknownDependencyError,
    has_no_errors,
    is_error,
    is_loading,
    is_success,
)

__all__ = [
    "__version__",
    # Engine
    "Resolver",
    "Resolution",
    "Task",
    "ResolverConfig",
    # Results
    "Success",
    "Failure",
    "TaskResult",
    "ResolutionResult",
    "LoadingState",
    "LOADING",
    # Discriminators
    "is_success",
    "is_error",
    "is_loading",
    "has_no_errors",
    # Errors
    "ResolverError",
    "DuplicateTaskIdError",
    "UnknownDependencyError",
    "GraphStructureError",
    "MaxIterationsReachedError",
    "CycleDetectedError",
    "EmptyStreamError",
]
