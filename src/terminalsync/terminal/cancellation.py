"""Cooperative cancellation for waits on terminal commands.

Cancelling a token stops the caller's wait. It never signals the process
running inside the terminal.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from terminalsync.logging import get_logger

log = get_logger("cancellation")

T = TypeVar("T")


class CancellationToken:
    """Cancellation signal for asyncio code.

    Supports:
    - Cancellation via cancel() (idempotent)
    - Polling via is_cancelled
    - Awaiting via wait()
    - Callback registration via on_cancelled()

    Example:
        token = CancellationToken()
        loop.add_signal_handler(signal.SIGINT, token.cancel)
        await service.send_command("make", ["all"], token)

    All methods must be called from the event loop thread.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._event = asyncio.Event()
        self._callbacks: list[Callable[[], None]] = []
        self._timer: asyncio.TimerHandle | None = None

    @classmethod
    def after(cls, seconds: float) -> CancellationToken:
        """Create a token that cancels itself after ``seconds``.

        Must be called with a running event loop.
        """
        token = cls()
        token._timer = asyncio.get_running_loop().call_later(seconds, token.cancel)
        return token

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Request cancellation. Registered callbacks run once."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._event.set()

        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                log.warning("Cancellation callback error: %s", e)

    async def wait(self) -> None:
        """Suspend until the token is cancelled."""
        await self._event.wait()

    def on_cancelled(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a callback to run on cancellation.

        Runs immediately if the token is already cancelled.

        Returns:
            A function to unregister the callback.
        """
        if self._cancelled:
            callback()
            return lambda: None

        self._callbacks.append(callback)

        def unregister() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unregister


async def race(awaitable: Awaitable[T], token: CancellationToken) -> T | None:
    """Wait for ``awaitable`` or for ``token``, whichever comes first.

    Returns the awaitable's result, or None when the token wins. Exceptions
    from the awaitable propagate. The cancellation waiter is always cancelled.
    When the token wins, a coroutine passed in is cancelled too, but a future
    passed in is left for its owner to dispose.
    """
    if token.is_cancelled:
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        return None

    work = asyncio.ensure_future(awaitable)
    # Futures belong to the caller; tasks wrapped here are ours to cancel
    owned = work is not awaitable
    cancelled = asyncio.ensure_future(token.wait())
    try:
        done, _ = await asyncio.wait(
            {work, cancelled}, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        cancelled.cancel()
        if owned and not work.done():
            work.cancel()

    if work in done:
        return work.result()
    return None
