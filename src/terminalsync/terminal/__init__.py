"""Synchronous command execution on write-only terminals.

Provides SynchronousTerminalService, which wraps a terminal that only
accepts text and waits for the commands it sends to finish, plus local
implementations of the capabilities it consumes.
"""

from terminalsync.terminal.cancellation import CancellationToken, race
from terminalsync.terminal.errors import (
    CommandFailedError,
    SignalFileError,
    TerminalSyncError,
)
from terminalsync.terminal.filesystem import LocalFileSystem, LocalTemporaryFile
from terminalsync.terminal.interpreter import EnvironmentInterpreterService
from terminalsync.terminal.protocol import (
    FileSystem,
    InterpreterService,
    PythonInterpreter,
    TemporaryFile,
    TerminalService,
)
from terminalsync.terminal.state import ExecutionState
from terminalsync.terminal.subprocess_terminal import SubprocessTerminalService
from terminalsync.terminal.sync_service import SynchronousTerminalService
from terminalsync.terminal.watcher import CompletionWatcher

__all__ = [
    # Core
    "CompletionWatcher",
    "ExecutionState",
    "SynchronousTerminalService",
    # Cancellation
    "CancellationToken",
    "race",
    # Errors
    "CommandFailedError",
    "SignalFileError",
    "TerminalSyncError",
    # Capabilities
    "FileSystem",
    "InterpreterService",
    "PythonInterpreter",
    "TemporaryFile",
    "TerminalService",
    # Local implementations
    "EnvironmentInterpreterService",
    "LocalFileSystem",
    "LocalTemporaryFile",
    "SubprocessTerminalService",
]
