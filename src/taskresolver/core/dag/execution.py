"""Task execution unit.

Invokes a task function and normalizes whatever it returns into a
``TaskResult``. Three return shapes are accepted, told apart by duck typing:

- async iterable (``__aiter__``): the first item is the value, the iterator
  is closed right after
- awaitable (``__await__``): awaited
- anything else: used as is
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

from taskresolver.core.dag.task import Task
from taskresolver.core.errors import EmptyStreamError, TaskCancelledError
from taskresolver.core.types import Failure, Success, TaskResult

logger = logging.getLogger(__name__)


def is_async_iterable(value: Any) -> bool:
    """Check if a value is a lazy multi-value stream."""
    return hasattr(value, "__aiter__")


def is_awaitable(value: Any) -> bool:
    """Check if a value is a deferred single value."""
    return inspect.isawaitable(value)


async def _close_stream(iterator: AsyncIterator[Any], task_id: str) -> None:
    """Close an iterator if it supports it, logging (not raising) failures."""
    aclose = getattr(iterator, "aclose", None)
    if aclose is None:
        return
    try:
        await aclose()
    except Exception:
        logger.exception(
            "stream_close_failed: task_id=%s",
            task_id,
            extra={"task_id": task_id},
        )


async def first_value(stream: AsyncIterable[Any], task_id: str) -> Any:
    """Take the first item of an async iterable and close it.

    A failing ``aclose()`` is logged and never replaces the outcome of the
    stream itself.

    Args:
        stream: The async iterable returned by a task.
        task_id: Owning task, used in the error.

    Returns:
        The first item.

    Raises:
        EmptyStreamError: If the stream finishes without an item.
    """
    iterator: AsyncIterator[Any] = aiter(stream)
    try:
        return await anext(iterator)
    except StopAsyncIteration:
        raise EmptyStreamError(task_id) from None
    finally:
        await _close_stream(iterator, task_id)


async def settle(value: Any, task_id: str) -> Any:
    """Wait for a task return value to become a plain value."""
    if is_async_iterable(value):
        return await first_value(value, task_id)
    if is_awaitable(value):
        return await value
    return value


async def execute_task(
    task: Task,
    producers: dict[str, TaskResult],
    global_args: Any,
) -> TaskResult:
    """Run one task function inside a failure boundary.

    Args:
        task: The task to run.
        producers: Results of the task's producers, keyed by id.
        global_args: Global arguments of the resolution.

    Returns:
        Success with the value, or Failure with the captured exception.

    Raises:
        asyncio.CancelledError: If the surrounding unit is cancelled.
    """
    try:
        value = await settle(task.fn(producers, global_args), task.id)
    except asyncio.CancelledError:
        current = asyncio.current_task()
        if current is not None and current.cancelling():
            raise
        logger.debug("task_cancelled_itself: task_id=%s", task.id)
        return Failure(TaskCancelledError(task.id))
    except Exception as e:
        logger.debug(
            "task_failed: task_id=%s, error=%s: %s",
            task.id,
            type(e).__name__,
            e,
            extra={"task_id": task.id},
        )
        return Failure(e)

    return Success(value)
