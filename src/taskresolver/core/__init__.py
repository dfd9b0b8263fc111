"""Core - the task graph engine.

This module contains no knowledge of:
- Persistence or job queues
- Processes other than the current one
- How it will be used

Architecture:
    dag/        Resolver, Resolution stream, task execution
    deferred    Single-assignment value used to gate dependents
    cancellation
                Token shared by all task units of one resolution
    types       Task results, loading marker, resolution result
    errors      Exception taxonomy
    config      Resolution defaults (env / .env aware)
"""

from taskresolver.core.cancellation import CancellationToken
from taskresolver.core.config import ResolverConfig
from taskresolver.core.dag import Resolution, Resolver, Task, TaskNode
from taskresolver.core.deferred import Deferred
from taskresolver.core.errors import (
    CycleDetectedError,
    DeferredAlreadySuppliedError,
    DuplicateTaskIdError,
    EmptyStreamError,
    GraphStructureError,
    InvalidTaskIdError,
    MaxIterationsReachedError,
    RegistrationError,
    ResolverError,
    TaskCancelledError,
    TaskExecutionError,
    UnknownDependencyError,
)
from taskresolver.core.types import (
    LOADING,
    Failure,
    LoadingState,
    ResolutionResult,
    ResolutionState,
    Success,
    TaskResult,
    has_no_errors,
    is_error,
    is_loading,
    is_success,
)

__all__ = [
    # Engine
    "Resolver",
    "Resolution",
    "Task",
    "TaskNode",
    "ResolverConfig",
    # Primitives
    "Deferred",
    "CancellationToken",
    # Types
    "Success",
    "Failure",
    "TaskResult",
    "LoadingState",
    "LOADING",
    "ResolutionResult",
    "ResolutionState",
    # Discriminators
    "is_success",
    "is_error",
    "is_loading",
    "has_no_errors",
    # Errors
    "ResolverError",
    "RegistrationError",
    "InvalidTaskIdError",
    "DuplicateTaskIdError",
    "UnknownDependencyError",
    "GraphStructureError",
    "MaxIterationsReachedError",
    "CycleDetectedError",
    "TaskExecutionError",
    "EmptyStreamError",
    "TaskCancelledError",
    "DeferredAlreadySuppliedError",
]
