"""Tests for LocalFileSystem."""

from __future__ import annotations

from pathlib import Path

import pytest

from terminalsync.terminal.filesystem import LocalFileSystem


class TestLocalFileSystem:
    @pytest.fixture
    def fs(self, tmp_path):
        return LocalFileSystem(temp_dir=str(tmp_path))

    @pytest.mark.asyncio
    async def test_create_temporary_file(self, fs, tmp_path):
        first = await fs.create_temporary_file(".log")
        second = await fs.create_temporary_file(".log")

        assert first.path != second.path
        for temp in (first, second):
            path = Path(temp.path)
            assert path.exists()
            assert path.parent == tmp_path
            assert path.suffix == ".log"
            assert path.read_text() == ""

    @pytest.mark.asyncio
    async def test_read_file(self, fs):
        temp = await fs.create_temporary_file(".log")
        Path(temp.path).write_text("START\nEND\n", encoding="utf-8")

        assert await fs.read_file(temp.path) == "START\nEND\n"

    @pytest.mark.asyncio
    async def test_read_invalid_utf8_is_replaced(self, fs):
        temp = await fs.create_temporary_file(".log")
        Path(temp.path).write_bytes(b"START\xff\n")

        assert (await fs.read_file(temp.path)).startswith("START")

    @pytest.mark.asyncio
    async def test_read_missing_file(self, fs, tmp_path):
        with pytest.raises(FileNotFoundError):
            await fs.read_file(str(tmp_path / "missing.log"))

    @pytest.mark.asyncio
    async def test_dispose_deletes_once(self, fs):
        temp = await fs.create_temporary_file(".log")

        temp.dispose()
        assert not Path(temp.path).exists()

        # A later file at the same path belongs to someone else
        Path(temp.path).write_text("other")
        temp.dispose()

        assert Path(temp.path).read_text() == "other"

    @pytest.mark.asyncio
    async def test_dispose_after_external_delete(self, fs):
        temp = await fs.create_temporary_file(".log")
        Path(temp.path).unlink()

        temp.dispose()

        assert not Path(temp.path).exists()
