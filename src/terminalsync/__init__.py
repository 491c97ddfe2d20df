"""terminalsync: wait for commands sent to terminals that only accept text."""

__version__ = "0.1.0"

from terminalsync.config import Config, get_config, load_config
from terminalsync.factory import create_synchronous_terminal
from terminalsync.terminal import (
    CancellationToken,
    CommandFailedError,
    CompletionWatcher,
    ExecutionState,
    SignalFileError,
    SubprocessTerminalService,
    SynchronousTerminalService,
    TerminalSyncError,
)

__all__ = [
    # Main entry points
    "SynchronousTerminalService",
    "create_synchronous_terminal",
    "CancellationToken",
    # Core
    "CompletionWatcher",
    "ExecutionState",
    "SubprocessTerminalService",
    # Errors
    "CommandFailedError",
    "SignalFileError",
    "TerminalSyncError",
    # Config
    "Config",
    "load_config",
    "get_config",
]
