"""Local shell used as a write-only terminal."""

from __future__ import annotations

import asyncio
import contextlib
import os
import sys
from collections.abc import Callable

from terminalsync.logging import get_logger

log = get_logger("terminal")


def default_shell() -> str:
    if sys.platform == "win32":
        return os.environ.get("COMSPEC", "cmd.exe")
    return os.environ.get("SHELL") or "/bin/sh"


class SubprocessTerminalService:
    """A long-lived shell process that only accepts input.

    Text sent to the terminal is written to the shell's stdin. The shell's
    output goes straight to this process's stdout/stderr, and nothing is
    reported back, the same as an IDE terminal. The shell is started lazily
    on the first send.
    """

    def __init__(self, shell: str | None = None, cwd: str | None = None) -> None:
        """Initialize the terminal.

        Args:
            shell: Shell executable. Defaults to $SHELL, /bin/sh or %COMSPEC%.
            cwd: Working directory for the shell.
        """
        self._shell = shell or default_shell()
        self._cwd = cwd
        self._process: asyncio.subprocess.Process | None = None
        self._monitor: asyncio.Task[None] | None = None
        self._close_listeners: list[Callable[[], None]] = []
        self._lock = asyncio.Lock()
        self._disposed = False

    @property
    def is_running(self) -> bool:
        return self._process is not None and self._process.returncode is None

    async def send_command(self, command: str, args: list[str]) -> None:
        await self.send_text(" ".join([command, *args]))

    async def send_text(self, text: str) -> None:
        if self._disposed:
            raise RuntimeError("Terminal has been disposed")
        # One writer at a time so lines are not interleaved
        async with self._lock:
            process = await self._ensure_started()
            assert process.stdin is not None
            log.debug("Sending to terminal: %s", text)
            process.stdin.write((text + "\n").encode("utf-8"))
            await process.stdin.drain()

    async def show(self, preserve_focus: bool = False) -> None:
        # Output is already on the console
        log.debug("show(preserve_focus=%s)", preserve_focus)

    @property
    def on_did_close(self) -> Callable[[Callable[[], None]], Callable[[], None]]:
        return self._add_close_listener

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        process = self._process
        if process is None or process.returncode is not None:
            return
        if process.stdin is not None:
            process.stdin.close()
        with contextlib.suppress(ProcessLookupError):
            process.terminate()
        log.debug("Terminal disposed (pid %d)", process.pid)

    def _add_close_listener(self, listener: Callable[[], None]) -> Callable[[], None]:
        self._close_listeners.append(listener)

        def unregister() -> None:
            if listener in self._close_listeners:
                self._close_listeners.remove(listener)

        return unregister

    async def _ensure_started(self) -> asyncio.subprocess.Process:
        if self._process is not None and self._process.returncode is None:
            return self._process
        if self._process is not None:
            raise RuntimeError(
                f"Terminal shell exited with status {self._process.returncode}"
            )

        self._process = await asyncio.create_subprocess_exec(
            self._shell,
            stdin=asyncio.subprocess.PIPE,
            cwd=self._cwd,
        )
        log.info("Started terminal shell %s (pid %d)", self._shell, self._process.pid)
        self._monitor = asyncio.get_running_loop().create_task(self._watch_exit())
        return self._process

    async def _watch_exit(self) -> None:
        assert self._process is not None
        status = await self._process.wait()
        log.info("Terminal shell exited with status %s", status)
        for listener in list(self._close_listeners):
            try:
                listener()
            except Exception as e:
                log.error("Error in terminal close listener: %s", e)
