"""In-memory stand-ins for the capabilities SynchronousTerminalService uses."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from terminalsync.terminal.protocol import PythonInterpreter


class FakeTemporaryFile:
    def __init__(self, fs: FakeFileSystem, path: str) -> None:
        self._fs = fs
        self._path = path
        self.dispose_count = 0

    @property
    def path(self) -> str:
        return self._path

    def dispose(self) -> None:
        self.dispose_count += 1
        self._fs.files.pop(self._path, None)


class FakeFileSystem:
    """Dict-backed filesystem.

    Attributes:
        files: path -> content
        reads: Number of read_file() calls
        fail_create: Raise OSError from create_temporary_file()
    """

    def __init__(self) -> None:
        self.files: dict[str, str] = {}
        self.created: list[FakeTemporaryFile] = []
        self.reads = 0
        self.fail_create = False

    async def create_temporary_file(self, extension: str) -> FakeTemporaryFile:
        if self.fail_create:
            raise PermissionError("read-only temp dir")
        path = f"/tmp/signal-{len(self.created) + 1}{extension}"
        self.files[path] = ""
        temp = FakeTemporaryFile(self, path)
        self.created.append(temp)
        return temp

    async def read_file(self, path: str) -> str:
        self.reads += 1
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]

    def append(self, path: str, text: str) -> None:
        if path in self.files:
            self.files[path] += text


class RecordingTerminal:
    """Terminal that records everything sent to it.

    ``on_send`` is called with (command, args) for every send_command().
    """

    def __init__(self, on_send: Callable[[str, list[str]], None] | None = None) -> None:
        self.commands: list[tuple[str, list[str]]] = []
        self.texts: list[str] = []
        self.shown: list[bool] = []
        self.disposed = False
        self.close_listeners: list[Callable[[], None]] = []
        self.on_send = on_send

    async def send_command(self, command: str, args: list[str]) -> None:
        self.commands.append((command, list(args)))
        if self.on_send is not None:
            self.on_send(command, args)

    async def send_text(self, text: str) -> None:
        self.texts.append(text)

    async def show(self, preserve_focus: bool = False) -> None:
        self.shown.append(preserve_focus)

    @property
    def on_did_close(self) -> Callable[[Callable[[], None]], Callable[[], None]]:
        return self._register

    def _register(self, listener: Callable[[], None]) -> Callable[[], None]:
        self.close_listeners.append(listener)
        return lambda: self.close_listeners.remove(listener)

    def dispose(self) -> None:
        self.disposed = True


class FakeInterpreterService:
    def __init__(self, interpreter: PythonInterpreter | None = None) -> None:
        self.interpreter = interpreter
        self.calls = 0

    async def get_active_interpreter(self) -> PythonInterpreter | None:
        self.calls += 1
        return self.interpreter


def write_markers(
    fs: FakeFileSystem,
    path: str,
    markers: list[str],
    delay: float = 0.02,
) -> None:
    """Append ``markers`` to ``path`` one at a time, ``delay`` seconds apart."""
    loop = asyncio.get_running_loop()
    for i, marker in enumerate(markers, start=1):
        loop.call_later(delay * i, fs.append, path, marker + "\n")
