"""Exceptions raised while waiting on commands sent to a terminal."""

from __future__ import annotations


class TerminalSyncError(Exception):
    """Base class for terminalsync failures."""


class CommandFailedError(TerminalSyncError):
    """The helper launcher reported that the wrapped command failed."""

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(
            f"Command failed with errors, check the terminal for details. Command: {command}"
        )


class SignalFileError(TerminalSyncError):
    """The signal file could not be created or read.

    This is a failure of the synchronization mechanism itself, not of the
    command that was sent to the terminal.
    """

    def __init__(self, path: str | None, message: str) -> None:
        self.path = path
        super().__init__(message)
