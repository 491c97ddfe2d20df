"""Builds a ready-to-use synchronous terminal from configuration."""

from __future__ import annotations

from terminalsync.config.schema import Config
from terminalsync.terminal.filesystem import LocalFileSystem
from terminalsync.terminal.interpreter import EnvironmentInterpreterService
from terminalsync.terminal.protocol import PythonInterpreter, TerminalService
from terminalsync.terminal.subprocess_terminal import SubprocessTerminalService
from terminalsync.terminal.sync_service import (
    BUNDLED_HELPER_SCRIPT,
    SynchronousTerminalService,
)


def create_synchronous_terminal(
    config: Config,
    terminal_service: TerminalService | None = None,
    python_interpreter: PythonInterpreter | None = None,
    cwd: str | None = None,
) -> SynchronousTerminalService:
    """Wrap ``terminal_service`` (default: a local shell) per ``config``."""
    launcher = config.launcher
    if terminal_service is None:
        terminal_service = SubprocessTerminalService(shell=launcher.shell, cwd=cwd)

    return SynchronousTerminalService(
        LocalFileSystem(),
        EnvironmentInterpreterService(configured=launcher.interpreter),
        terminal_service,
        python_interpreter,
        helper_script=launcher.helper_script or BUNDLED_HELPER_SCRIPT,
        fallback_interpreter=launcher.fallback_interpreter,
        signal_file_suffix=launcher.signal_file_suffix,
        poll_interval=config.watcher.poll_interval,
        max_read_failures=config.watcher.max_read_failures,
    )
