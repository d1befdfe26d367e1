"""Pytest configuration and fixtures."""

import sys
from typing import Any, Callable, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest

from adb_tools_mcp.config import ServerConfig

ADB_PATH = "/opt/android/platform-tools/adb"


@pytest.fixture
def adb_path() -> str:
    return ADB_PATH


@pytest.fixture
def config() -> ServerConfig:
    """Config pointing at a fake adb path; nothing is spawned with it."""
    return ServerConfig(adb_path=ADB_PATH)


@pytest.fixture
def python_cmd() -> Callable[[str], List[str]]:
    """Argv that runs a Python snippet, standing in for an adb binary."""

    def _build(code: str) -> List[str]:
        return [sys.executable, "-c", code]

    return _build


@pytest.fixture
def fake_process() -> Callable[..., MagicMock]:
    """Factory for asyncio subprocess doubles."""

    def _make(stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0) -> MagicMock:
        process = MagicMock()
        process.communicate = AsyncMock(return_value=(stdout, stderr))
        process.wait = AsyncMock(return_value=returncode)
        process.returncode = returncode
        process.pid = 4242
        return process

    return _make


@pytest.fixture
def activity_params() -> Dict[str, Any]:
    """Fully populated start-activity parameters."""
    return {
        "component": "com.example/.MainActivity",
        "action": "android.intent.action.VIEW",
        "data": "https://example.com/a b?q=1&r=2",
        "mime_type": "text/html",
        "category": ["android.intent.category.DEFAULT", "android.intent.category.BROWSABLE"],
        "extras": [
            {"type": "string", "key": "name", "value": "hello world"},
            {"type": "int", "key": "count", "value": "3"},
        ],
        "flags": ["0x10000000"],
        "wait_for_launch": True,
        "debuggable": False,
        "stop_app": True,
    }
