"""Local filesystem capability backed by the OS temp directory."""

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path

from terminalsync.logging import get_logger

log = get_logger("filesystem")


class LocalTemporaryFile:
    """A temp file that is deleted on dispose(). Dispose is idempotent."""

    def __init__(self, path: str) -> None:
        self._path = path
        self._disposed = False

    @property
    def path(self) -> str:
        return self._path

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        try:
            Path(self._path).unlink(missing_ok=True)
        except OSError as e:
            log.warning("Could not delete %s: %s", self._path, e)

    def __repr__(self) -> str:
        return f"<LocalTemporaryFile {self._path}>"


class LocalFileSystem:
    """Reads and creates files on the local disk.

    Blocking calls run in the default executor to keep the event loop free.
    """

    def __init__(self, temp_dir: str | None = None) -> None:
        """Initialize the filesystem.

        Args:
            temp_dir: Directory for temporary files. Defaults to the
                platform temp directory.
        """
        self._temp_dir = temp_dir

    async def create_temporary_file(self, extension: str) -> LocalTemporaryFile:
        loop = asyncio.get_running_loop()
        path = await loop.run_in_executor(None, self._make_temp, extension)
        log.debug("Created temporary file %s", path)
        return LocalTemporaryFile(path)

    async def read_file(self, path: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read, path)

    def _make_temp(self, extension: str) -> str:
        fd, path = tempfile.mkstemp(suffix=extension, prefix="terminalsync-", dir=self._temp_dir)
        os.close(fd)
        return path

    @staticmethod
    def _read(path: str) -> str:
        with open(path, encoding="utf-8", errors="replace") as f:
            return f.read()
