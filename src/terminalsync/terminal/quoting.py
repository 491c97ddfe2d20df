"""Quoting of tokens injected into a terminal's input."""

from __future__ import annotations

import shlex
import subprocess
import sys

# Characters cmd.exe acts on outside of a caret escape
_CMD_METACHARS = frozenset('()%!^"<>&|')


def _quote_cmd(value: str) -> str:
    quoted = subprocess.list2cmdline([value])
    if not any(c in _CMD_METACHARS for c in value):
        return quoted
    if not quoted.startswith('"'):
        quoted = f'"{quoted}"'
    # cmd.exe strips the carets, the program's argv parser sees the quotes
    return "".join(f"^{c}" if c in _CMD_METACHARS else c for c in quoted)


def to_command_argument(value: str, platform: str | None = None) -> str:
    """Quote ``value`` so a shell reads it back as one unchanged token.

    On Windows, tokens holding cmd.exe metacharacters are double quoted for
    the program's argument parser and every metacharacter, quotes included,
    is caret-escaped so cmd.exe neither splits, redirects nor expands it.

    Args:
        value: A command, argument or path.
        platform: Overrides sys.platform (used by tests).

    Returns:
        The token, quoted for the target shell when needed.
    """
    platform = platform or sys.platform
    if platform == "win32":
        return _quote_cmd(value)
    return shlex.quote(value)


def to_command_line(tokens: list[str], platform: str | None = None) -> str:
    """Quote every token and join them with spaces."""
    return " ".join(to_command_argument(t, platform) for t in tokens)
