"""Deferred value - a single-assignment slot with waiters.

A Deferred pairs a value that is not available yet with an explicit
``supply()`` operation and a separate ``wait()`` that suspends the caller
until the value arrives. Failures are carried as data (the value type is a
task result), so there is no rejection channel.

Example:
    >>> handle: Deferred[int] = Deferred()
    >>>
    >>> async def consumer():
    ...     return await handle.wait()
    >>>
    >>> task = asyncio.create_task(consumer())
    >>> handle.supply(42)
    >>> await task
    42
"""

from __future__ import annotations

import asyncio
from typing import Generic, TypeVar

from taskresolver.core.errors import DeferredAlreadySuppliedError

T = TypeVar("T")

_EMPTY = object()


class Deferred(Generic[T]):
    """Single-assignment container that suspends readers until written.

    Once cancelled, waiters are released with ``asyncio.CancelledError``
    and any later ``supply()`` is ignored.
    """

    __slots__ = ("_value", "_event", "_cancelled")

    def __init__(self) -> None:
        self._value: object = _EMPTY
        self._event = asyncio.Event()
        self._cancelled = False

    @property
    def is_supplied(self) -> bool:
        """Whether a value has been supplied."""
        return self._value is not _EMPTY

    @property
    def is_cancelled(self) -> bool:
        """Whether the handle was cancelled."""
        return self._cancelled

    def supply(self, value: T) -> None:
        """Store the value and wake every waiter.

        Args:
            value: The value to publish.

        Raises:
            DeferredAlreadySuppliedError: If a value was already supplied.
        """
        if self._cancelled:
            return
        if self._value is not _EMPTY:
            raise DeferredAlreadySuppliedError("Deferred value already supplied")
        self._value = value
        self._event.set()

    def cancel(self) -> None:
        """Close the handle.

        Safe to call multiple times. Has no effect on waiters once a value
        was supplied.
        """
        if self._cancelled or self._value is not _EMPTY:
            return
        self._cancelled = True
        self._event.set()

    async def wait(self) -> T:
        """Wait for the value.

        Returns:
            The supplied value.

        Raises:
            asyncio.CancelledError: If the handle was cancelled first.
        """
        await self._event.wait()
        if self._cancelled:
            raise asyncio.CancelledError()
        return self._value  # type: ignore[return-value]

    def __repr__(self) -> str:
        if self._cancelled:
            state = "cancelled"
        elif self.is_supplied:
            state = f"value={self._value!r}"
        else:
            state = "pending"
        return f"Deferred({state})"
