"""Dispatch engine - one tool call to one adb run to one result."""

from typing import Any, Dict, Mapping, Optional

import structlog
from pydantic import ValidationError

from adb_tools_mcp.builder import build_command
from adb_tools_mcp.config import ServerConfig
from adb_tools_mcp.errors import (
    AdbToolError,
    ErrorKind,
    cancelled_error,
    invalid_params_error,
    unknown_operation_error,
)
from adb_tools_mcp.executor import execute
from adb_tools_mcp.operations import OperationSpec, get_operation
from adb_tools_mcp.results import ExecutionResult, Failure, Success
from adb_tools_mcp.selector import resolve_target, selector_from_params

logger = structlog.get_logger()


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(item) for item in err.get("loc", ()))
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts)


class Dispatcher:
    """Validate, build, run and classify calls against the configured adb."""

    def __init__(self, config: ServerConfig) -> None:
        self.config = config

    def parse_params(self, operation: OperationSpec, arguments: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Apply the operation's schema and defaults to raw tool arguments."""
        try:
            model = operation.params_model.model_validate(dict(arguments or {}))
        except ValidationError as exc:
            raise invalid_params_error(operation.name, _describe_validation_error(exc)) from exc
        return model.model_dump()

    async def dispatch(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ExecutionResult:
        """Run one catalog operation.

        Every failure comes back as a ``Failure`` whose message starts with
        the operation's prefix. Only task cancellation escapes.
        """
        operation = get_operation(name)
        if operation is None:
            error = unknown_operation_error(name)
            logger.warning("tool_call_rejected", tool=name, code=error.code)
            return Failure.from_error(error)

        try:
            params = self.parse_params(operation, arguments)
            target = resolve_target(selector_from_params(params))
            cmd = build_command(self.config.adb_path, operation, params, target)
        except AdbToolError as error:
            logger.warning("tool_call_rejected", tool=name, code=error.code, reason=error.message)
            return self._failure(operation, error.kind, error.message)

        result = await execute(cmd)
        if isinstance(result, Failure):
            return self._failure(operation, result.kind, result.message)

        confirmation = operation.confirmation(params)
        if confirmation is not None and (operation.always_confirm or not result.stdout):
            return Success(stdout=confirmation)
        return result

    def cancelled(self, name: str, reason: str) -> Failure:
        """Failure for a call the caller abandoned (timeout, shutdown)."""
        error = cancelled_error(reason)
        operation = get_operation(name)
        if operation is None:
            return Failure.from_error(error)
        return self._failure(operation, error.kind, error.message)

    @staticmethod
    def _failure(operation: OperationSpec, kind: ErrorKind, message: str) -> Failure:
        return Failure(kind=kind, message=f"{operation.failure_prefix}: {message}")
