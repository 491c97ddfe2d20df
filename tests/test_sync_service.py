"""Tests for SynchronousTerminalService."""

from __future__ import annotations

import asyncio
import time

import pytest

from terminalsync.terminal.cancellation import CancellationToken
from terminalsync.terminal.errors import CommandFailedError, SignalFileError
from terminalsync.terminal.protocol import PythonInterpreter
from terminalsync.terminal.sync_service import SynchronousTerminalService
from tests.utils import (
    FakeFileSystem,
    FakeInterpreterService,
    RecordingTerminal,
    write_markers,
)

POLL = 0.01
HELPER = "/opt/terminalsync/shell_exec.py"


def make_service(
    fs: FakeFileSystem,
    terminal: RecordingTerminal,
    interpreter: PythonInterpreter | None = PythonInterpreter("/usr/bin/python3"),
    override: PythonInterpreter | None = None,
) -> tuple[SynchronousTerminalService, FakeInterpreterService]:
    resolver = FakeInterpreterService(interpreter)
    service = SynchronousTerminalService(
        fs,
        resolver,
        terminal,
        override,
        helper_script=HELPER,
        poll_interval=POLL,
    )
    return service, resolver


def helper_writes(fs: FakeFileSystem, markers: list[str]):
    """on_send hook that plays the helper launcher's part."""

    def on_send(command: str, args: list[str]) -> None:
        write_markers(fs, args[-1], markers)

    return on_send


class TestSendCommandWithoutCancellation:
    @pytest.mark.asyncio
    async def test_forwards_command_unchanged(self):
        fs = FakeFileSystem()
        terminal = RecordingTerminal()
        service, resolver = make_service(fs, terminal)

        await service.send_command("echo", ["hi"])

        assert terminal.commands == [("echo", ["hi"])]
        assert fs.created == []
        assert resolver.calls == 0


class TestSendCommandWaits:
    @pytest.mark.asyncio
    async def test_completes_and_removes_signal_file(self):
        fs = FakeFileSystem()
        terminal = RecordingTerminal(on_send=helper_writes(fs, ["START", "END"]))
        service, _ = make_service(fs, terminal)

        await asyncio.wait_for(
            service.send_command("build", [], CancellationToken()), timeout=2
        )

        assert len(fs.created) == 1
        assert fs.created[0].path not in fs.files
        assert fs.created[0].dispose_count == 1
        assert service._disposables == []

    @pytest.mark.asyncio
    async def test_failure_raises_with_command_text(self):
        fs = FakeFileSystem()
        terminal = RecordingTerminal(on_send=helper_writes(fs, ["START", "FAIL 2"]))
        service, _ = make_service(fs, terminal)

        with pytest.raises(CommandFailedError, match="build"):
            await asyncio.wait_for(
                service.send_command("build", ["--all"], CancellationToken()), timeout=2
            )

        assert fs.created[0].path not in fs.files

    @pytest.mark.asyncio
    async def test_cancellation_returns_early(self):
        fs = FakeFileSystem()
        terminal = RecordingTerminal()
        service, _ = make_service(fs, terminal)
        service._poll_interval = 0.1

        token = CancellationToken.after(0.05)
        started = time.perf_counter()
        await asyncio.wait_for(service.send_command("sleep", ["10"], token), timeout=2)
        elapsed = time.perf_counter() - started

        assert token.is_cancelled
        assert elapsed < 1.0
        assert fs.created[0].path not in fs.files

    @pytest.mark.asyncio
    async def test_cancellation_stops_polling(self):
        fs = FakeFileSystem()
        terminal = RecordingTerminal()
        service, _ = make_service(fs, terminal)

        token = CancellationToken.after(0.03)
        await service.send_command("sleep", ["10"], token)
        await asyncio.sleep(0)
        reads = fs.reads
        await asyncio.sleep(POLL * 5)

        assert fs.reads == reads

    @pytest.mark.asyncio
    async def test_already_cancelled_token(self):
        fs = FakeFileSystem()
        terminal = RecordingTerminal()
        service, _ = make_service(fs, terminal)
        token = CancellationToken()
        token.cancel()

        await asyncio.wait_for(service.send_command("make", [], token), timeout=2)

        assert len(terminal.commands) == 1
        assert fs.created[0].path not in fs.files

    @pytest.mark.asyncio
    async def test_signal_file_exists_before_send(self):
        fs = FakeFileSystem()
        seen: list[bool] = []

        def on_send(command: str, args: list[str]) -> None:
            seen.append(args[-1] in fs.files)
            fs.append(args[-1], "END\n")

        service, _ = make_service(fs, RecordingTerminal(on_send=on_send))

        await asyncio.wait_for(service.send_command("make", [], CancellationToken()), timeout=2)

        assert seen == [True]


class TestRewrittenInvocation:
    @pytest.mark.asyncio
    async def test_helper_invocation_is_quoted(self, monkeypatch):
        monkeypatch.setattr("sys.platform", "linux")
        fs = FakeFileSystem()
        terminal = RecordingTerminal(on_send=helper_writes(fs, ["END"]))
        service, _ = make_service(fs, terminal)

        await service.send_command("echo", ["hello world", "$HOME"], CancellationToken())

        command, args = terminal.commands[0]
        assert command == "/usr/bin/python3"
        assert args == [
            HELPER,
            "echo",
            "'hello world'",
            "'$HOME'",
            "/tmp/signal-1.log",
        ]

    @pytest.mark.asyncio
    async def test_interpreter_override_wins(self):
        fs = FakeFileSystem()
        terminal = RecordingTerminal(on_send=helper_writes(fs, ["END"]))
        service, resolver = make_service(fs, terminal, override=PythonInterpreter("/venv/bin/python"))

        await service.send_command("make", [], CancellationToken())

        assert terminal.commands[0][0] == "/venv/bin/python"
        assert resolver.calls == 0

    @pytest.mark.asyncio
    async def test_falls_back_when_nothing_resolves(self):
        fs = FakeFileSystem()
        terminal = RecordingTerminal(on_send=helper_writes(fs, ["END"]))
        service, resolver = make_service(fs, terminal, interpreter=None)

        await service.send_command("make", [], CancellationToken())

        assert terminal.commands[0][0] == "python"
        assert resolver.calls == 1


class TestInfrastructureFailures:
    @pytest.mark.asyncio
    async def test_signal_file_creation_failure(self):
        fs = FakeFileSystem()
        fs.fail_create = True
        terminal = RecordingTerminal()
        service, _ = make_service(fs, terminal)

        with pytest.raises(SignalFileError):
            await service.send_command("make", [], CancellationToken())

        assert terminal.commands == []

    @pytest.mark.asyncio
    async def test_unreadable_signal_file_is_not_a_command_failure(self):
        fs = FakeFileSystem()

        def on_send(command: str, args: list[str]) -> None:
            del fs.files[args[-1]]

        terminal = RecordingTerminal(on_send=on_send)
        service, _ = make_service(fs, terminal)
        service._max_read_failures = 3

        with pytest.raises(SignalFileError) as exc_info:
            await asyncio.wait_for(
                service.send_command("make", ["all"], CancellationToken()), timeout=2
            )

        assert not isinstance(exc_info.value, CommandFailedError)
        assert exc_info.value.path == fs.created[0].path
        assert "make all" in str(exc_info.value)
        assert fs.created[0].dispose_count == 1
        assert service._disposables == []

    @pytest.mark.asyncio
    async def test_send_failure_still_cleans_up(self):
        fs = FakeFileSystem()

        def on_send(command: str, args: list[str]) -> None:
            raise BrokenPipeError("terminal closed")

        service, _ = make_service(fs, RecordingTerminal(on_send=on_send))

        with pytest.raises(BrokenPipeError):
            await service.send_command("make", [], CancellationToken())

        assert fs.files == {}
        assert service._disposables == []


class TestPassThrough:
    @pytest.mark.asyncio
    async def test_send_text_and_show(self):
        terminal = RecordingTerminal()
        service, _ = make_service(FakeFileSystem(), terminal)

        await service.send_text("ls -la")
        await service.show(True)

        assert terminal.texts == ["ls -la"]
        assert terminal.shown == [True]

    def test_on_did_close_is_forwarded(self):
        terminal = RecordingTerminal()
        service, _ = make_service(FakeFileSystem(), terminal)
        calls: list[str] = []

        unregister = service.on_did_close(lambda: calls.append("closed"))
        for listener in terminal.close_listeners:
            listener()
        unregister()

        assert calls == ["closed"]
        assert terminal.close_listeners == []

    def test_dispose_swallows_errors(self):
        terminal = RecordingTerminal()
        service, _ = make_service(FakeFileSystem(), terminal)
        disposed: list[str] = []

        class Failing:
            def dispose(self) -> None:
                raise OSError("busy")

        class Recording:
            def dispose(self) -> None:
                disposed.append("ok")

        service._disposables.extend([Failing(), Recording()])
        service.dispose()

        assert terminal.disposed
        assert disposed == ["ok"]
        assert service._disposables == []
