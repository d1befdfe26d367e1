"""Error model for the adb dispatch engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(Enum):
    """Where a dispatch failed."""

    VALIDATION = "validation"
    SPAWN = "spawn"
    TOOL = "tool"
    CANCELLED = "cancelled"


@dataclass
class AdbToolError(Exception):
    """
    Error raised while preparing or running an adb command.

    The kind tells the caller which stage failed; the message is what ends
    up in the failure result shown to the client.
    """

    kind: ErrorKind
    code: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    remediation: str = ""

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "kind": self.kind.value,
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "remediation": self.remediation,
        }


def unknown_operation_error(name: str) -> AdbToolError:
    """Create error for a tool name outside the catalog."""
    return AdbToolError(
        kind=ErrorKind.VALIDATION,
        code="ERR_UNKNOWN_TOOL",
        message=f"Unknown tool: {name}",
        context={"name": name},
        remediation="List the available tools and retry with one of them.",
    )


def invalid_params_error(operation: str, reason: str) -> AdbToolError:
    """Create error for arguments that do not match the tool schema."""
    return AdbToolError(
        kind=ErrorKind.VALIDATION,
        code="ERR_INVALID_PARAMS",
        message=f"Invalid parameters: {reason}",
        context={"operation": operation, "reason": reason},
        remediation="Check the tool input schema.",
    )


def missing_param_error(operation: str, param: str) -> AdbToolError:
    """Create error for a required parameter that was not supplied."""
    return AdbToolError(
        kind=ErrorKind.VALIDATION,
        code="ERR_MISSING_PARAM",
        message=f"Missing required parameter: {param}",
        context={"operation": operation, "param": param},
    )


def missing_alternative_error(operation: str, params: tuple) -> AdbToolError:
    """Create error for an operation that needs at least one of several parameters."""
    if len(params) == 2:
        wanted = f"Either {params[0]} or {params[1]}"
    else:
        wanted = "One of " + ", ".join(params)
    return AdbToolError(
        kind=ErrorKind.VALIDATION,
        code="ERR_MISSING_TARGET",
        message=f"{wanted} must be specified",
        context={"operation": operation, "params": list(params)},
    )


def unknown_extra_type_error(extra_type: Any, key: Any) -> AdbToolError:
    """Create error for an intent extra with an unsupported type tag."""
    return AdbToolError(
        kind=ErrorKind.VALIDATION,
        code="ERR_EXTRA_TYPE",
        message=f"Unknown extra type {extra_type!r} for key {key!r}",
        context={"type": extra_type, "key": key},
        remediation="Use one of: string, int, long, float, boolean, uri, component.",
    )


def adb_spawn_error(adb_path: str, exc: OSError) -> AdbToolError:
    """Create error for an adb binary that could not be started."""
    return AdbToolError(
        kind=ErrorKind.SPAWN,
        code="ERR_ADB_SPAWN",
        message=f"{type(exc).__name__}: {exc}",
        context={"adb_path": adb_path, "errno": exc.errno},
        remediation="Install Android platform-tools and pass the adb path to the server.",
    )


def adb_command_error(stderr: str, returncode: Optional[int]) -> AdbToolError:
    """Create error for an adb run that reported failure."""
    if stderr:
        message = stderr
    else:
        message = f"process failed with exit code {returncode}"
    return AdbToolError(
        kind=ErrorKind.TOOL,
        code="ERR_ADB_COMMAND",
        message=message,
        context={"returncode": returncode},
        remediation="Check adb connection and command arguments, then retry.",
    )


def cancelled_error(reason: str) -> AdbToolError:
    """Create error for a call the caller gave up on."""
    return AdbToolError(
        kind=ErrorKind.CANCELLED,
        code="ERR_CANCELLED",
        message=reason,
        context={"reason": reason},
    )
