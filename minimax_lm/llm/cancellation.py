"""Cooperative cancellation for streamed requests."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    Host-owned token for cooperative cancellation of a response.

    Consumers poll ``is_cancelled`` and may register callbacks with
    ``on_cancel``.  Each registration returns a function that removes the
    callback again.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: list[Callable[[], None]] = []

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Request cancellation and notify callbacks."""
        if self._cancelled:
            return
        self._cancelled = True
        for callback in list(self._callbacks):
            try:
                callback()
            except Exception:
                logger.exception("Cancellation callback failed")

    def on_cancel(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Register *callback*; it runs immediately if already cancelled.

        Returns a dispose function that unregisters the callback.
        """
        self._callbacks.append(callback)
        if self._cancelled:
            callback()

        def dispose() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return dispose

    @property
    def listener_count(self) -> int:
        return len(self._callbacks)


class RequestAborted(Exception):
    """The in-flight request was aborted through its ``AbortSignal``."""

    def __init__(self, message: str = "Request aborted") -> None:
        super().__init__(message)


class AbortSignal:
    """
    Per-request abort flag the transport can await.

    ``abort()`` is synchronous so it can be wired straight into
    ``CancellationToken.on_cancel``.
    """

    def __init__(self) -> None:
        self._aborted = False
        self._event: asyncio.Event | None = None

    @property
    def aborted(self) -> bool:
        return self._aborted

    def abort(self) -> None:
        if self._aborted:
            return
        self._aborted = True
        if self._event is not None:
            self._event.set()

    async def wait(self) -> None:
        """Block until ``abort()`` is called."""
        if self._aborted:
            return
        if self._event is None:
            self._event = asyncio.Event()
        await self._event.wait()

    def raise_if_aborted(self) -> None:
        if self._aborted:
            raise RequestAborted()
