"""Resolution - one end-to-end execution of a task graph.

A Resolution is a lazy async stream. Nothing runs until it is iterated.
It emits an optional loading marker followed by exactly one
``ResolutionResult``, or raises a structural error before any task runs.

Closing the stream early (``aclose()``, leaving an ``async with`` block, or
cancelling the task that iterates it) cancels every task unit still in
flight and waits for their cleanup before returning.

Breaking out of a bare ``async for`` does not close the stream: the task
units keep running to completion in the background. Iterate inside
``async with`` (or ``contextlib.aclosing``) when leaving early.

Example:
    >>> async with resolver.resolve(with_loading_state=True) as stream:
    ...     async for value in stream:
    ...         if is_loading(value):
    ...             print("Loading...")
    ...         else:
    ...             print(value.tasks)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from taskresolver.core.cancellation import CancellationToken
from taskresolver.core.dag.execution import execute_task
from taskresolver.core.deferred import Deferred
from taskresolver.core.errors import GraphStructureError
from taskresolver.core.types import (
    LOADING,
    LoadingState,
    ResolutionResult,
    ResolutionState,
    TaskResult,
    is_success,
)

if TYPE_CHECKING:
    from taskresolver.core.dag.graph import Resolver
    from taskresolver.core.dag.task import TaskNode

logger = logging.getLogger(__name__)

# Observer hooks
TaskStartCallback = Callable[[str], None]
TaskCompleteCallback = Callable[[str, TaskResult], None]

# Marker for "no per-call global args override"
UNSET: Any = object()


class Resolution:
    """A single execution of a resolver's task graph.

    Lifecycle:
        1. Created PENDING by ``Resolver.resolve()``
        2. First iteration snapshots the graph and global args, plans the
           waves and starts one task unit per node (RUNNING)
        3. Emits LOADING first if loading state was requested
        4. Emits the ResolutionResult (COMPLETED)
        5. Ends as FAILED on a structural error, or CANCELLED when closed
           before the result
    """

    def __init__(
        self,
        resolver: Resolver,
        global_args: Any = UNSET,
        with_loading_state: bool = False,
        max_iterations: int = 100,
        on_task_start: TaskStartCallback | None = None,
        on_task_complete: TaskCompleteCallback | None = None,
    ) -> None:
        self._resolution_id = str(uuid4())
        self._resolver = resolver
        self._global_args_override = global_args
        self._with_loading_state = with_loading_state
        self._max_iterations = max_iterations
        self._on_task_start = on_task_start
        self._on_task_complete = on_task_complete

        self._state = ResolutionState.PENDING
        self._global_args: Any = None
        self._nodes: dict[str, TaskNode] = {}
        self._handles: dict[str, Deferred[TaskResult]] = {}
        self._units: list[asyncio.Task[None]] = []
        self._token = CancellationToken()
        self._result: ResolutionResult | None = None

    @property
    def resolution_id(self) -> str:
        """Unique identifier of this resolution."""
        return self._resolution_id

    @property
    def state(self) -> ResolutionState:
        """Current lifecycle state."""
        return self._state

    @property
    def result(self) -> ResolutionResult | None:
        """Terminal result, once delivered."""
        return self._result

    @property
    def is_complete(self) -> bool:
        """Whether the stream has ended (completed, failed or cancelled)."""
        return self._state in (
            ResolutionState.COMPLETED,
            ResolutionState.FAILED,
            ResolutionState.CANCELLED,
        )

    # Async iteration

    def __aiter__(self) -> Resolution:
        return self

    async def __anext__(self) -> ResolutionResult | LoadingState:
        if self._state is ResolutionState.PENDING:
            self._start()
            # Let root tasks reach their first suspension point
            await asyncio.sleep(0)
            if self._with_loading_state:
                return LOADING

        if self._state is ResolutionState.RUNNING:
            return await self._finish()

        raise StopAsyncIteration

    async def __aenter__(self) -> Resolution:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Stop the resolution.

        Cancels every running task unit and waits for their cleanup. Once
        closed, the stream never delivers a terminal result.
        """
        if self._state is ResolutionState.PENDING:
            self._state = ResolutionState.CANCELLED
            return
        if self._state is not ResolutionState.RUNNING:
            return

        self._state = ResolutionState.CANCELLED
        self._token.cancel()

        pending = [unit for unit in self._units if not unit.done()]
        for unit in pending:
            unit.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        logger.debug(
            "resolution_cancelled: resolution_id=%s, interrupted=%d",
            self._resolution_id,
            len(pending),
            extra={"resolution_id": self._resolution_id},
        )

    async def collect(self) -> ResolutionResult:
        """Drive the stream to the end and return the terminal result.

        Raises:
            GraphStructureError: If the graph cannot be resolved.
            RuntimeError: If the stream was closed before the result.
        """
        async with self:
            async for value in self:
                if isinstance(value, ResolutionResult):
                    return value
        raise RuntimeError(f"Resolution {self._resolution_id} ended without a result")

    # Internals

    def _start(self) -> None:
        """Snapshot the graph and fan out one unit per task."""
        if self._global_args_override is UNSET:
            self._global_args = self._resolver.global_args
        else:
            self._global_args = self._global_args_override

        try:
            waves = self._resolver.execution_waves(self._max_iterations)
        except GraphStructureError as e:
            self._state = ResolutionState.FAILED
            logger.debug(
                "resolution_failed: resolution_id=%s, error=%s",
                self._resolution_id,
                e,
                extra={"resolution_id": self._resolution_id},
            )
            raise

        self._nodes = self._resolver.snapshot()
        self._handles = {task_id: Deferred() for task_id in self._nodes}
        for handle in self._handles.values():
            self._token.on_cancel(handle.cancel)

        self._state = ResolutionState.RUNNING

        logger.debug(
            "resolution_started: resolution_id=%s, tasks=%d, roots=%d, waves=%d",
            self._resolution_id,
            len(self._nodes),
            sum(1 for node in self._nodes.values() if node.is_root),
            len(waves),
            extra={"resolution_id": self._resolution_id},
        )

        for wave in waves:
            for task_id in wave:
                unit = asyncio.create_task(
                    self._run_unit(self._nodes[task_id]),
                    name=f"taskresolver:{task_id}",
                )
                self._units.append(unit)

    async def _finish(self) -> ResolutionResult:
        """Wait for every task result and build the terminal value."""
        try:
            tasks: dict[str, TaskResult] = {}
            for task_id, handle in self._handles.items():
                tasks[task_id] = await handle.wait()
            await asyncio.gather(*self._units)
        except asyncio.CancelledError:
            await self.aclose()
            raise

        result = ResolutionResult.from_tasks(tasks, global_args=self._global_args)
        self._result = result
        self._state = ResolutionState.COMPLETED

        logger.debug(
            "resolution_completed: resolution_id=%s, tasks=%d, has_errors=%s",
            self._resolution_id,
            len(tasks),
            result.has_errors,
            extra={"resolution_id": self._resolution_id},
        )
        return result

    async def _run_unit(self, node: TaskNode) -> None:
        """Wait for producers, run the task and publish its result."""
        producers: dict[str, TaskResult] = {}
        for producer_id in node.producers:
            producers[producer_id] = await self._handles[producer_id].wait()

        self._token.check()
        self._notify(self._on_task_start, node.id)

        result = await execute_task(node.task, producers, self._global_args)

        self._token.check()
        self._handles[node.id].supply(result)

        logger.debug(
            "task_completed: resolution_id=%s, task_id=%s, ok=%s",
            self._resolution_id,
            node.id,
            is_success(result),
            extra={"resolution_id": self._resolution_id, "task_id": node.id},
        )

        self._notify(self._on_task_complete, node.id, result)

    def _notify(self, callback: Callable[..., None] | None, *args: Any) -> None:
        """Invoke an observer hook, logging (not propagating) its failures."""
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            logger.exception(
                "task_hook_failed: resolution_id=%s, task_id=%s",
                self._resolution_id,
                args[0],
                extra={"resolution_id": self._resolution_id, "task_id": args[0]},
            )

    def __repr__(self) -> str:
        return f"Resolution(id={self._resolution_id!r}, state={self._state.value})"
