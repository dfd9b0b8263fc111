"""Cooperative cancellation for resolutions.

Every resolution owns one CancellationToken shared by all of its task
units. Closing the resolution stream cancels the token; units that are
still suspended are cancelled and run their cleanup path.

Typical usage:
1. A Resolution creates a CancellationToken when it starts
2. Task units check the token before publishing their result
3. ``Resolution.aclose()`` calls token.cancel()
4. Callbacks registered with on_cancel() run once, in order
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class CancellationToken:
    """Token for cooperative cancellation.

    Can be used to request and check cancellation status across async
    boundaries.

    Example:
        >>> token = CancellationToken()
        >>> token.on_cancel(lambda: print("cleaning up"))
        >>>
        >>> # Cancel from another task
        >>> token.cancel()
        cleaning up
        >>> token.check()
        Traceback (most recent call last):
        ...
        asyncio.CancelledError
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._event = asyncio.Event()
        self._callbacks: list[Callable[[], None]] = []

    def cancel(self) -> None:
        """Request cancellation.

        Sets the cancelled flag, signals any waiters and runs registered
        callbacks. This is safe to call multiple times.
        """
        if self._cancelled:
            return
        self._cancelled = True
        self._event.set()

        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception:
                logger.exception("cancel_callback_failed: callback=%r", callback)

    @property
    def is_cancelled(self) -> bool:
        """Check if cancellation was requested.

        Returns:
            True if cancel() has been called.
        """
        return self._cancelled

    def check(self) -> None:
        """Raise CancelledError if cancelled.

        Raises:
            asyncio.CancelledError: If cancellation was requested.
        """
        if self._cancelled:
            raise asyncio.CancelledError()

    def on_cancel(self, callback: Callable[[], None]) -> None:
        """Register a callback to run on cancellation.

        Runs immediately if the token is already cancelled.

        Args:
            callback: Zero-argument callable.
        """
        if self._cancelled:
            callback()
            return
        self._callbacks.append(callback)

    async def wait(self) -> None:
        """Wait until cancelled."""
        await self._event.wait()
