"""Command-line interface for terminalsync."""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from terminalsync import __version__
from terminalsync.config import Config, load_config
from terminalsync.factory import create_synchronous_terminal
from terminalsync.logging import setup_logging
from terminalsync.terminal.cancellation import CancellationToken
from terminalsync.terminal.errors import CommandFailedError, SignalFileError
from terminalsync.terminal.protocol import PythonInterpreter
from terminalsync.terminal.quoting import to_command_line

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INFRASTRUCTURE = 2
EXIT_CANCELLED = 130


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="terminalsync",
        description="Run a command in a shell terminal and wait for it to finish",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=None,
        help="Increase log verbosity (can be repeated)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Stop waiting after this many seconds",
    )
    parser.add_argument(
        "--python",
        help="Interpreter used to run the helper launcher",
    )
    parser.add_argument(
        "--shell",
        help="Shell for the terminal (default: $SHELL or /bin/sh)",
    )
    parser.add_argument(
        "--cwd",
        type=Path,
        help="Working directory for the terminal",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Extra config file, applied after system/user/project configs",
    )
    parser.add_argument("command", help="Command to run")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Command arguments")
    return parser


def apply_cli_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Return a copy of ``config`` with command-line flags applied.

    The loaded config may be the cached global one, so it is never mutated.
    """
    launcher = config.launcher
    if args.shell:
        launcher = replace(launcher, shell=args.shell)
    logging_config = config.logging
    if args.verbose is not None:
        logging_config = replace(logging_config, verbose=min(args.verbose + 2, 4))
    return replace(config, launcher=launcher, logging=logging_config)


async def run_command(args: argparse.Namespace, config: Config, console: Console) -> int:
    """Send the command through a local terminal and wait for it."""
    python = PythonInterpreter(path=args.python, source="cli") if args.python else None

    terminal = create_synchronous_terminal(
        config,
        python_interpreter=python,
        cwd=str(args.cwd) if args.cwd else None,
    )
    token = (
        CancellationToken.after(args.timeout)
        if args.timeout is not None
        else CancellationToken()
    )

    loop = asyncio.get_running_loop()
    if sys.platform != "win32":
        loop.add_signal_handler(signal.SIGINT, token.cancel)

    command_line = to_command_line([args.command, *args.args])
    console.print(f"[bold]Running[/bold] {escape(command_line)}")
    try:
        await terminal.send_command(args.command, list(args.args), token)
    except CommandFailedError as e:
        console.print(f"[red]Failed:[/red] {escape(str(e))}")
        return EXIT_FAILED
    except SignalFileError as e:
        console.print(f"[red]Unable to track command:[/red] {escape(str(e))}")
        return EXIT_INFRASTRUCTURE
    finally:
        if sys.platform != "win32":
            loop.remove_signal_handler(signal.SIGINT)
        terminal.dispose()

    if token.is_cancelled:
        console.print("[yellow]Cancelled[/yellow] (the command may still be running)")
        return EXIT_CANCELLED
    console.print("[green]Completed[/green]")
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the terminalsync command."""
    parser = create_parser()
    args = parser.parse_args(argv)

    config = apply_cli_overrides(
        load_config(
            project_root=str(args.cwd) if args.cwd else None,
            config_file=args.config,
        ),
        args,
    )
    setup_logging(config.logging)

    console = Console()
    try:
        return asyncio.run(run_command(args, config, console))
    except KeyboardInterrupt:
        console.print("[yellow]Cancelled[/yellow]")
        return EXIT_CANCELLED
