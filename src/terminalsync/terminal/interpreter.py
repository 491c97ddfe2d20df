"""Resolution of the interpreter that launches the helper script."""

from __future__ import annotations

import os
import shutil
import sys
from pathlib import Path

from terminalsync.logging import get_logger
from terminalsync.terminal.protocol import PythonInterpreter

log = get_logger("interpreter")


def _env_python(prefix: str) -> Path:
    if sys.platform == "win32":
        # venvs keep python.exe under Scripts, conda envs at the root
        scripts = Path(prefix) / "Scripts" / "python.exe"
        return scripts if scripts.exists() else Path(prefix) / "python.exe"
    return Path(prefix) / "bin" / "python"


class EnvironmentInterpreterService:
    """Finds the interpreter of the active environment.

    Lookup order:
    1. Explicitly configured interpreter
    2. Active virtualenv (VIRTUAL_ENV)
    3. Active conda environment (CONDA_PREFIX)
    4. python3 / python on PATH
    """

    def __init__(self, configured: str | None = None) -> None:
        self._configured = configured

    async def get_active_interpreter(self) -> PythonInterpreter | None:
        if self._configured:
            return PythonInterpreter(path=self._configured, source="config")

        for var, source in (("VIRTUAL_ENV", "venv"), ("CONDA_PREFIX", "conda")):
            prefix = os.environ.get(var)
            if not prefix:
                continue
            candidate = _env_python(prefix)
            if candidate.exists():
                return PythonInterpreter(path=str(candidate), source=source)
            log.debug("%s is set but %s does not exist", var, candidate)

        for name in ("python3", "python"):
            found = shutil.which(name)
            if found:
                return PythonInterpreter(path=found, source="path")

        return None
