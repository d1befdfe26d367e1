"""Result shapes returned by a dispatch call."""

from dataclasses import dataclass
from typing import Union

from adb_tools_mcp.errors import AdbToolError, ErrorKind


@dataclass(frozen=True)
class Success:
    """adb ran cleanly; stdout is kept verbatim."""

    stdout: str


@dataclass(frozen=True)
class Failure:
    """Validation, spawn, tool or cancellation failure."""

    kind: ErrorKind
    message: str

    @classmethod
    def from_error(cls, error: AdbToolError) -> "Failure":
        return cls(kind=error.kind, message=error.message)


ExecutionResult = Union[Success, Failure]
