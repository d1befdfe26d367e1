"""Tests for the executor/classifier."""

import asyncio
import os
import stat
from pathlib import Path
from typing import Any, Callable, List
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from adb_tools_mcp.errors import ErrorKind
from adb_tools_mcp.executor import execute
from adb_tools_mcp.results import Failure, Success


class TestClassification:
    """Tests run against a real child process."""

    @pytest.mark.asyncio
    async def test_stdout_verbatim(self, python_cmd: Callable[[str], List[str]]) -> None:
        """Should return stdout untrimmed."""
        result = await execute(python_cmd("import sys; sys.stdout.write('  List of devices\\n\\n')"))

        assert result == Success(stdout="  List of devices\n\n")

    @pytest.mark.asyncio
    async def test_empty_stdout_is_success(self, python_cmd: Callable[[str], List[str]]) -> None:
        """Should treat silent clean exit as success."""
        result = await execute(python_cmd("pass"))

        assert result == Success(stdout="")

    @pytest.mark.asyncio
    async def test_nonzero_exit_with_stderr(self, python_cmd: Callable[[str], List[str]]) -> None:
        """Should report stderr verbatim."""
        result = await execute(
            python_cmd("import sys; sys.stderr.write('error: device not found\\n'); sys.exit(1)")
        )

        assert result == Failure(kind=ErrorKind.TOOL, message="error: device not found\n")

    @pytest.mark.asyncio
    async def test_nonzero_exit_without_stderr(self, python_cmd: Callable[[str], List[str]]) -> None:
        """Should fall back to a generic message."""
        result = await execute(python_cmd("import sys; print('partial'); sys.exit(3)"))

        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.TOOL
        assert result.message == "process failed with exit code 3"

    @pytest.mark.asyncio
    async def test_stderr_on_zero_exit_is_failure(self, python_cmd: Callable[[str], List[str]]) -> None:
        """Should fail when adb writes stderr even with exit code 0."""
        result = await execute(
            python_cmd("import sys; print('ok'); sys.stderr.write('adb: warning: something')")
        )

        assert result == Failure(kind=ErrorKind.TOOL, message="adb: warning: something")

    @pytest.mark.asyncio
    async def test_argument_not_shell_interpreted(self, python_cmd: Callable[[str], List[str]]) -> None:
        """Should hand metacharacters to the child untouched."""
        payload = "a b; echo pwned `id` $(whoami) 'q' \"dq\""
        cmd = python_cmd("import sys; sys.stdout.write(sys.argv[1])") + [payload]

        result = await execute(cmd)

        assert result == Success(stdout=payload)

    @pytest.mark.asyncio
    async def test_invalid_utf8_replaced(self, python_cmd: Callable[[str], List[str]]) -> None:
        """Should decode undecodable bytes instead of failing."""
        result = await execute(python_cmd("import sys; sys.stdout.buffer.write(b'ok\\xff')"))

        assert result == Success(stdout="ok�")


class TestSpawnFailure:
    """Tests for binaries that cannot be started."""

    @pytest.mark.asyncio
    async def test_missing_binary(self, tmp_path: Path) -> None:
        """Should report the spawn error."""
        missing = str(tmp_path / "no-such-adb")

        result = await execute([missing, "devices"])

        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.SPAWN
        assert result.message.startswith("FileNotFoundError:")

    @pytest.mark.asyncio
    async def test_not_executable(self, tmp_path: Path) -> None:
        """Should report permission problems as spawn errors."""
        binary = tmp_path / "adb"
        binary.write_text("#!/bin/sh\necho hi\n")
        os.chmod(binary, stat.S_IRUSR | stat.S_IWUSR)

        result = await execute([str(binary), "devices"])

        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.SPAWN
        assert "PermissionError" in result.message


class TestSpawnArguments:
    """Tests for how the child is started."""

    @pytest.mark.asyncio
    async def test_uses_exec_not_shell(self, fake_process: Callable[..., MagicMock]) -> None:
        """Should pass argv entries separately to create_subprocess_exec."""
        process = fake_process(stdout=b"Success\n")
        spawn = AsyncMock(return_value=process)

        with patch("adb_tools_mcp.executor.asyncio.create_subprocess_exec", new=spawn):
            result = await execute(("/opt/adb", "install", "-r", "/tmp/my app.apk"))

        assert result == Success(stdout="Success\n")
        args: Any = spawn.call_args.args
        assert args == ("/opt/adb", "install", "-r", "/tmp/my app.apk")
        assert spawn.call_args.kwargs["stdout"] == asyncio.subprocess.PIPE
        assert spawn.call_args.kwargs["stderr"] == asyncio.subprocess.PIPE

    @pytest.mark.asyncio
    async def test_none_outputs(self, fake_process: Callable[..., MagicMock]) -> None:
        """Should cope with missing output buffers."""
        process = fake_process()
        process.communicate = AsyncMock(return_value=(None, None))

        with patch(
            "adb_tools_mcp.executor.asyncio.create_subprocess_exec",
            new=AsyncMock(return_value=process),
        ):
            result = await execute(("/opt/adb", "kill-server"))

        assert result == Success(stdout="")


class TestCancellation:
    """Tests for cancelling a running command."""

    @pytest.mark.asyncio
    async def test_cancel_kills_child(self, python_cmd: Callable[[str], List[str]]) -> None:
        """Should kill and reap the child, then propagate the cancellation."""
        real_spawn = asyncio.create_subprocess_exec
        spawned = []

        async def tracking_spawn(*args: Any, **kwargs: Any) -> Any:
            process = await real_spawn(*args, **kwargs)
            spawned.append(process)
            return process

        with patch("adb_tools_mcp.executor.asyncio.create_subprocess_exec", new=tracking_spawn):
            task = asyncio.create_task(execute(python_cmd("import time; time.sleep(30)")))
            for _ in range(200):
                if spawned:
                    break
                await asyncio.sleep(0.01)
            await asyncio.sleep(0.1)
            task.cancel()

            with pytest.raises(asyncio.CancelledError):
                await task

        assert len(spawned) == 1
        assert spawned[0].returncode is not None

    @pytest.mark.asyncio
    async def test_cancel_with_process_already_gone(self, fake_process: Callable[..., MagicMock]) -> None:
        """Should still propagate when the child exited on its own."""
        process = fake_process()
        process.communicate = AsyncMock(side_effect=asyncio.CancelledError())
        process.kill.side_effect = ProcessLookupError()

        with patch(
            "adb_tools_mcp.executor.asyncio.create_subprocess_exec",
            new=AsyncMock(return_value=process),
        ):
            with pytest.raises(asyncio.CancelledError):
                await execute(("/opt/adb", "shell", "am", "start", "-W", "-a", "x"))

        process.wait.assert_awaited_once()
