"""Terminal decorator that waits for sent commands to finish."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from terminalsync.logging import get_logger
from terminalsync.terminal.cancellation import race
from terminalsync.terminal.errors import SignalFileError
from terminalsync.terminal.quoting import to_command_argument
from terminalsync.terminal.watcher import (
    DEFAULT_MAX_READ_FAILURES,
    DEFAULT_POLL_INTERVAL,
    CompletionWatcher,
)

if TYPE_CHECKING:
    from terminalsync.terminal.cancellation import CancellationToken
    from terminalsync.terminal.protocol import (
        Disposable,
        FileSystem,
        InterpreterService,
        PythonInterpreter,
        TemporaryFile,
        TerminalEvent,
        TerminalService,
    )

log = get_logger("sync")

BUNDLED_HELPER_SCRIPT = str(Path(__file__).resolve().parent.parent / "shell_exec.py")


class SynchronousTerminalService:
    """Makes send_command() wait until the command has finished.

    Terminals only accept text, so instead of sending the command itself:
    - create a signal file and start watching it
    - send a line that runs the helper launcher with the original command
      and the signal file path as arguments
    - the helper runs the command as a subprocess and writes its progress
      markers to the signal file
    - wait for the watcher, or for the cancellation token

    Every other operation is forwarded unchanged to the wrapped terminal.
    """

    def __init__(
        self,
        fs: FileSystem,
        interpreter: InterpreterService,
        terminal_service: TerminalService,
        python_interpreter: PythonInterpreter | None = None,
        *,
        helper_script: str = BUNDLED_HELPER_SCRIPT,
        fallback_interpreter: str = "python",
        signal_file_suffix: str = ".log",
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_read_failures: int = DEFAULT_MAX_READ_FAILURES,
    ) -> None:
        """Initialize the service.

        Args:
            fs: Creates and reads signal files.
            interpreter: Resolves the interpreter when none is given.
            terminal_service: The terminal commands are sent to. Owned by
                this service and disposed with it.
            python_interpreter: Interpreter override for the helper.
            helper_script: Path of the helper launcher script.
            fallback_interpreter: Used when no interpreter can be resolved.
            signal_file_suffix: Extension of created signal files.
            poll_interval: Seconds between signal file reads.
            max_read_failures: Consecutive failed reads before giving up.
        """
        self.terminal_service = terminal_service
        self._fs = fs
        self._interpreter = interpreter
        self._python_interpreter = python_interpreter
        self._helper_script = helper_script
        self._fallback_interpreter = fallback_interpreter
        self._signal_file_suffix = signal_file_suffix
        self._poll_interval = poll_interval
        self._max_read_failures = max_read_failures
        self._disposables: list[Disposable] = []

    @property
    def on_did_close(self) -> TerminalEvent:
        return self.terminal_service.on_did_close

    def dispose(self) -> None:
        self.terminal_service.dispose()
        while self._disposables:
            disposable = self._disposables.pop(0)
            try:
                disposable.dispose()
            except Exception as e:
                log.warning("Error disposing %r: %s", disposable, e)

    async def send_command(
        self,
        command: str,
        args: list[str],
        cancel: CancellationToken | None = None,
    ) -> None:
        """Send a command and wait for it to finish.

        Without a cancellation token the command is forwarded as-is and this
        returns once it has been sent.

        Args:
            command: Executable name or path.
            args: Arguments for the command.
            cancel: Stops the wait when cancelled. The command itself keeps
                running in the terminal.

        Raises:
            CommandFailedError: The command failed.
            SignalFileError: The signal file could not be created or read.
        """
        if cancel is None:
            await self.terminal_service.send_command(command, args)
            return

        signal_file = await self._create_signal_file()
        watcher = CompletionWatcher(
            signal_file.path,
            self._fs,
            [command, *args],
            poll_interval=self._poll_interval,
            max_read_failures=self._max_read_failures,
        )
        try:
            python_exec = await self._resolve_interpreter()
            await self.terminal_service.send_command(
                python_exec,
                [
                    to_command_argument(self._helper_script),
                    to_command_argument(command),
                    *(to_command_argument(arg) for arg in args),
                    to_command_argument(signal_file.path),
                ],
            )
            await race(watcher.completed, cancel)
            if cancel.is_cancelled and not watcher.completed.done():
                log.info("Stopped waiting for %s (cancelled)", " ".join([command, *args]))
        finally:
            watcher.dispose()
            self._release(signal_file)

    async def send_text(self, text: str) -> None:
        await self.terminal_service.send_text(text)

    async def show(self, preserve_focus: bool = False) -> None:
        await self.terminal_service.show(preserve_focus)

    async def _resolve_interpreter(self) -> str:
        interpreter = self._python_interpreter or await self._interpreter.get_active_interpreter()
        if interpreter is not None and interpreter.path:
            return to_command_argument(interpreter.path)
        log.debug("No interpreter resolved, using %s", self._fallback_interpreter)
        return self._fallback_interpreter

    async def _create_signal_file(self) -> TemporaryFile:
        try:
            signal_file = await self._fs.create_temporary_file(self._signal_file_suffix)
        except OSError as e:
            raise SignalFileError(None, f"Unable to create signal file: {e}") from e
        self._disposables.append(signal_file)
        return signal_file

    def _release(self, signal_file: TemporaryFile) -> None:
        if signal_file in self._disposables:
            self._disposables.remove(signal_file)
        try:
            signal_file.dispose()
        except Exception as e:
            log.warning("Error removing signal file %s: %s", signal_file.path, e)
