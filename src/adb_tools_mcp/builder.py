"""Command builder - operation grammar plus parameters to an adb argv.

User-supplied values always travel as single argv entries; no local shell
is involved. adb joins everything after ``shell`` with spaces and hands the
line to the device shell, so for those operations each value is also
``shlex.quote``d and reaches the device command as one literal argument.
"""

import shlex
from typing import Any, Callable, Dict, List, Mapping, Tuple

from adb_tools_mcp.errors import (
    missing_alternative_error,
    missing_param_error,
    unknown_extra_type_error,
)
from adb_tools_mcp.operations import ArgKind, ArgSpec, OperationSpec
from adb_tools_mcp.selector import TargetFlag

CommandLine = Tuple[str, ...]

EXTRA_TYPE_FLAGS: Dict[str, str] = {
    "string": "--es",
    "int": "--ei",
    "long": "--el",
    "float": "--ef",
    "boolean": "--ez",
    "uri": "--eu",
    "component": "--ecn",
}


def _is_set(value: Any) -> bool:
    return value is not None and value != "" and value != []


def _extra_fields(entry: Any) -> Tuple[Any, Any, Any]:
    if isinstance(entry, Mapping):
        return entry.get("type"), entry.get("key"), entry.get("value")
    return getattr(entry, "type", None), getattr(entry, "key", None), getattr(entry, "value", None)


def _runs_on_device_shell(operation: OperationSpec) -> bool:
    first = operation.args[0] if operation.args else None
    return first is not None and first.kind is ArgKind.LITERAL and first.tokens[:1] == ("shell",)


def _identity(value: str) -> str:
    return value


def _expand_extras(entries: Any, quote: Callable[[str], str]) -> List[str]:
    tokens: List[str] = []
    for entry in entries or ():
        extra_type, key, value = _extra_fields(entry)
        type_flag = EXTRA_TYPE_FLAGS.get(extra_type) if isinstance(extra_type, str) else None
        if type_flag is None:
            raise unknown_extra_type_error(extra_type, key)
        tokens.extend([type_flag, quote(str(key)), quote(str(value))])
    return tokens


def _expand(
    operation: OperationSpec,
    arg: ArgSpec,
    params: Mapping[str, Any],
    quote: Callable[[str], str],
) -> List[str]:
    if arg.kind is ArgKind.LITERAL:
        return list(arg.tokens)

    value = params.get(arg.param) if arg.param else None

    if arg.kind is ArgKind.FLAG:
        return [arg.flag] if value is True else []
    if arg.kind is ArgKind.OPTION:
        return [arg.flag, quote(str(value))] if _is_set(value) else []
    if arg.kind is ArgKind.REPEATED:
        tokens: List[str] = []
        for item in value or ():
            tokens.extend([arg.flag, quote(str(item))])
        return tokens
    if arg.kind is ArgKind.EXTRAS:
        return _expand_extras(value, quote)
    if arg.kind is ArgKind.POSITIONAL:
        if value is None:
            if arg.required:
                raise missing_param_error(operation.name, arg.param)
            return []
        if value == "" and not arg.required:
            return []
        return [quote(str(value))]
    raise ValueError(f"Unhandled argument kind: {arg.kind}")


def build_command(
    adb_path: str,
    operation: OperationSpec,
    params: Mapping[str, Any],
    target: TargetFlag = (),
) -> CommandLine:
    """Assemble the full argv for one operation.

    Layout is ``adb_path``, the targeting flag, then the operation tokens in
    the order the catalog declares them. Values for ``adb shell`` operations
    are quoted for the device shell; other values are passed raw.

    Raises:
        AdbToolError: If a required parameter is missing, none of the
            alternative parameters is set, or an extra has an unknown type.
    """
    if operation.requires_one_of and not any(
        params.get(name) for name in operation.requires_one_of
    ):
        raise missing_alternative_error(operation.name, operation.requires_one_of)

    quote = shlex.quote if _runs_on_device_shell(operation) else _identity
    argv: List[str] = [adb_path, *target]
    for arg in operation.args:
        argv.extend(_expand(operation, arg, params, quote))
    return tuple(argv)
