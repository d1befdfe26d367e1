"""Run an assembled adb argv and classify what came back."""

import asyncio
import contextlib
from typing import Sequence

import structlog

from adb_tools_mcp.errors import adb_command_error, adb_spawn_error
from adb_tools_mcp.results import ExecutionResult, Failure, Success

logger = structlog.get_logger()


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace") if data else ""


async def execute(cmd: Sequence[str]) -> ExecutionResult:
    """Spawn adb directly (no shell) and wait for it to finish.

    Any stderr output counts as failure, even with a zero exit code, since
    adb reports some errors that way. Empty stdout with a clean exit is a
    success.

    Cancelling the awaiting task kills the child before the cancellation
    propagates.
    """
    argv = list(cmd)
    logger.debug("adb_command_started", argv=argv)
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        error = adb_spawn_error(argv[0], exc)
        logger.warning("adb_spawn_failed", adb_path=argv[0], error=error.message)
        return Failure.from_error(error)

    try:
        stdout, stderr = await process.communicate()
    except asyncio.CancelledError:
        with contextlib.suppress(ProcessLookupError):
            process.kill()
        await process.wait()
        logger.info("adb_command_cancelled", argv=argv, pid=process.pid)
        raise

    stdout_text = _decode(stdout)
    stderr_text = _decode(stderr)
    if process.returncode != 0 or stderr_text:
        error = adb_command_error(stderr_text, process.returncode)
        logger.info("adb_command_failed", argv=argv, returncode=process.returncode)
        return Failure.from_error(error)

    return Success(stdout=stdout_text)
