"""Completion detection by polling a signal file.

The helper launcher appends START, then END or FAIL, to the signal file as
the wrapped command progresses. CompletionWatcher polls the file and turns
those markers into a single completion event.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import TYPE_CHECKING

from terminalsync.logging import VERBOSE, get_logger
from terminalsync.terminal.errors import CommandFailedError, SignalFileError
from terminalsync.terminal.state import ExecutionState

if TYPE_CHECKING:
    from terminalsync.terminal.protocol import FileSystem

log = get_logger("watcher")

DEFAULT_POLL_INTERVAL = 0.1
DEFAULT_MAX_READ_FAILURES = 50


class CompletionWatcher:
    """Watches a signal file until the command it tracks finishes.

    Polling starts as soon as the watcher is constructed, so construction
    requires a running event loop. ``completed`` settles exactly once:
    - resolved when the file reports END without FAIL
    - rejected with CommandFailedError when the file reports FAIL
    - rejected with SignalFileError after ``max_read_failures`` consecutive
      failed reads

    Content without a terminal marker keeps the watcher polling until
    dispose() is called. A failed read is retried on the next tick.

    Example:
        watcher = CompletionWatcher(path, fs, ["make", "all"])
        try:
            await watcher.completed
        finally:
            watcher.dispose()
    """

    def __init__(
        self,
        signal_file: str,
        fs: FileSystem,
        command: Sequence[str],
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_read_failures: int = DEFAULT_MAX_READ_FAILURES,
    ) -> None:
        """Create the watcher and start polling.

        Args:
            signal_file: Path of the file the helper launcher writes to.
            fs: Filesystem capability used to read the file.
            command: The original command and args, for diagnostics.
            poll_interval: Seconds between reads.
            max_read_failures: Consecutive failed reads tolerated before
                giving up with SignalFileError.
        """
        self.signal_file = signal_file
        self.state = ExecutionState.NOT_STARTED
        self._fs = fs
        self._command = " ".join(command)
        self._poll_interval = poll_interval
        self._max_read_failures = max(1, max_read_failures)
        self._read_failures = 0

        loop = asyncio.get_running_loop()
        self._completed: asyncio.Future[None] = loop.create_future()
        self._completed.add_done_callback(self._on_settled)
        self._task: asyncio.Task[None] | None = loop.create_task(self._poll())

    @property
    def completed(self) -> asyncio.Future[None]:
        return self._completed

    @property
    def is_polling(self) -> bool:
        return self._task is not None and not self._task.done()

    def dispose(self) -> None:
        """Stop polling. Safe to call repeatedly and after settlement."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
        if not self._completed.done():
            self._completed.cancel()

    def _on_settled(self, future: asyncio.Future[None]) -> None:
        # Mark the outcome as observed; callers that raced past it never will
        if not future.cancelled():
            future.exception()
        self.dispose()

    async def _poll(self) -> None:
        try:
            while not self._completed.done():
                await self._tick()
                if self._completed.done():
                    break
                await asyncio.sleep(self._poll_interval)
        except Exception as e:
            log.error("Polling %s failed: %s", self.signal_file, e)
            if not self._completed.done():
                self._completed.set_exception(e)

    async def _tick(self) -> None:
        try:
            source = await self._fs.read_file(self.signal_file)
        except OSError as e:
            self._read_failures += 1
            log.debug(
                "Reading %s failed (%d/%d): %s",
                self.signal_file, self._read_failures, self._max_read_failures, e,
            )
            if self._read_failures >= self._max_read_failures:
                self._completed.set_exception(
                    SignalFileError(
                        self.signal_file,
                        f"Unable to read signal file {self.signal_file}: {e}. "
                        f"Command: {self._command}",
                    )
                )
            return

        self._read_failures = 0
        state = ExecutionState.from_markers(source)
        if state != self.state:
            log.log(VERBOSE, "Command state changed to %s. %s", state, self._command)
        self.state = state

        if state & ExecutionState.ERRORED:
            self._completed.set_exception(CommandFailedError(self._command))
        elif state.is_terminal:
            self._completed.set_result(None)

