"""Configuration schema dataclasses for terminalsync.

All fields are optional so partial configs at each level merge together.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class WatcherConfig:
    """Signal file polling.

    Example config.yaml:
        watcher:
          poll_interval: 0.1
          max_read_failures: 50
    """

    poll_interval: float = 0.1  # Seconds between signal file reads
    max_read_failures: int = 50  # Consecutive failed reads before giving up


@dataclass
class LauncherConfig:
    """How commands are wrapped before they reach the terminal.

    Example config.yaml:
        launcher:
          interpreter: /usr/bin/python3
          shell: /bin/bash
    """

    helper_script: str | None = None  # Default: bundled shell_exec.py
    interpreter: str | None = None  # Default: active environment
    fallback_interpreter: str = "python"  # Used when nothing resolves
    signal_file_suffix: str = ".log"
    shell: str | None = None  # Shell for the local terminal


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # 0-4, takes precedence over level
    file: str | None = None  # Log file path


@dataclass
class Config:
    """Root configuration."""

    watcher: WatcherConfig = field(default_factory=WatcherConfig)
    launcher: LauncherConfig = field(default_factory=LauncherConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)  # Unknown top-level keys
