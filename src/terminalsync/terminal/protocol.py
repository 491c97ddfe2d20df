"""Capabilities consumed by the synchronous terminal service."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

# Registers a listener and returns a function that unregisters it
TerminalEvent = Callable[[Callable[[], None]], Callable[[], None]]


class Disposable(Protocol):
    def dispose(self) -> None: ...


class TerminalService(Protocol):
    """A terminal that accepts text but reports nothing back.

    Implementations:
    - SubprocessTerminalService: long-lived local shell
    - SynchronousTerminalService: waits for commands sent to another terminal
    """

    async def send_command(self, command: str, args: list[str]) -> None:
        """Send ``command`` followed by ``args`` as one line of input."""
        ...

    async def send_text(self, text: str) -> None: ...

    async def show(self, preserve_focus: bool = False) -> None: ...

    @property
    def on_did_close(self) -> TerminalEvent: ...

    def dispose(self) -> None: ...


class TemporaryFile(Protocol):
    """A uniquely named file that is deleted on dispose()."""

    @property
    def path(self) -> str: ...

    def dispose(self) -> None: ...


class FileSystem(Protocol):
    async def create_temporary_file(self, extension: str) -> TemporaryFile:
        """Create an empty, uniquely named file ending in ``extension``."""
        ...

    async def read_file(self, path: str) -> str:
        """Return the full text content of ``path``."""
        ...


@dataclass(frozen=True)
class PythonInterpreter:
    """An interpreter able to run the helper launcher."""

    path: str
    source: str = "unknown"  # "config", "venv", "conda", "path"


class InterpreterService(Protocol):
    async def get_active_interpreter(self) -> PythonInterpreter | None: ...
