"""Catalog of adb operations exposed as MCP tools.

Each entry pairs a pydantic parameter model (which doubles as the tool's
input schema) with the ordered argument grammar the command builder walks.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, Field


class DeviceSelection(BaseModel):
    device_id: Optional[str] = Field(
        None, description="Target specific device by ID (takes precedence over use_usb and use_emulator)"
    )
    use_usb: bool = Field(False, description="Target USB connected device (-d)")
    use_emulator: bool = Field(False, description="Target emulator instance (-e)")


class GetDevicesParams(DeviceSelection):
    show_details: bool = Field(True, description="Show device details (-l)")


class ListPackagesParams(DeviceSelection):
    show_path: bool = Field(False, description="Show the APK file path for each package (-f)")
    show_disabled: bool = Field(False, description="Filter to only show disabled packages (-d)")
    show_enabled: bool = Field(False, description="Filter to only show enabled packages (-e)")
    show_system: bool = Field(False, description="Filter to only show system packages (-s)")
    show_third_party: bool = Field(False, description="Filter to only show third party packages (-3)")
    show_installer: bool = Field(False, description="Show the installer for each package (-i)")
    include_uninstalled: bool = Field(False, description="Include uninstalled packages (-u)")


class InputTextParams(DeviceSelection):
    text: str = Field(description="Text to input to the device")


class NoParams(DeviceSelection):
    pass


class InstallApkParams(DeviceSelection):
    apk_path: str = Field(description="Path to the APK file")
    allow_reinstall: bool = Field(True, description="Allow reinstalling an existing app (-r)")
    allow_test_packages: bool = Field(True, description="Allow test packages (-t)")
    allow_downgrade: bool = Field(True, description="Allow version code downgrade (-d)")
    grant_permissions: bool = Field(False, description="Grant all permissions (-g)")


class UninstallApkParams(DeviceSelection):
    package_name: str = Field(description="Package name of the application")
    keep_data: bool = Field(False, description="Keep the app data and cache directories (-k)")


class PackageParams(DeviceSelection):
    package_name: str = Field(description="Package name of the application")


class PullParams(DeviceSelection):
    remote_path: str = Field(description="Path to the file on the device")
    local_path: Optional[str] = Field(
        None, description="Path where to save the file locally (optional, defaults to current directory)"
    )


class PushParams(DeviceSelection):
    local_path: str = Field(description="Path to the local file")
    remote_path: str = Field(description="Destination path on the device")


class ScreencapParams(DeviceSelection):
    remote_path: str = Field(
        description="Path on device where to save the screenshot (e.g., /sdcard/screenshot.png)"
    )
    use_png: bool = Field(True, description="Save as PNG format (-p)")


class RemoveParams(DeviceSelection):
    path: str = Field(description="Path to the file on device to remove")
    force: bool = Field(False, description="Force removal (-f)")
    recursive: bool = Field(False, description="Recursive removal (-r)")


class PermissionParams(DeviceSelection):
    package_name: str = Field(description="Package name of the application")
    permission: str = Field(description="Permission name (e.g., android.permission.CAMERA)")


class IntentExtra(BaseModel):
    type: Literal["string", "int", "long", "float", "boolean", "uri", "component"]
    key: str
    value: str


class StartActivityParams(DeviceSelection):
    component: Optional[str] = Field(
        None,
        description="Component name (e.g., com.example/.MainActivity or com.example/com.example.MainActivity)",
    )
    action: Optional[str] = Field(None, description="Intent action (e.g., android.intent.action.VIEW)")
    data: Optional[str] = Field(None, description="Intent data URI")
    mime_type: Optional[str] = Field(None, description="MIME type (e.g., image/png)")
    category: Optional[List[str]] = Field(
        None, description='Intent categories (e.g., ["android.intent.category.LAUNCHER"])'
    )
    extras: Optional[List[IntentExtra]] = Field(
        None, description='Intent extras (e.g., [{"type": "string", "key": "key1", "value": "value1"}])'
    )
    flags: Optional[List[str]] = Field(
        None, description='Intent flags (e.g., ["activity_new_task", "activity_clear_top"])'
    )
    wait_for_launch: bool = Field(False, description="Wait for launch to complete (-W)")
    debuggable: bool = Field(False, description="Debug mode (-D)")
    stop_app: bool = Field(False, description="Force stop target app before starting activity (-S)")


class ArgKind(Enum):
    """How one grammar entry turns into argv tokens."""

    LITERAL = "literal"
    FLAG = "flag"
    OPTION = "option"
    REPEATED = "repeated"
    EXTRAS = "extras"
    POSITIONAL = "positional"


@dataclass(frozen=True)
class ArgSpec:
    kind: ArgKind
    param: Optional[str] = None
    flag: Optional[str] = None
    tokens: Tuple[str, ...] = ()
    required: bool = False


def literal(*tokens: str) -> ArgSpec:
    return ArgSpec(ArgKind.LITERAL, tokens=tokens)


def flag(param: str, token: str) -> ArgSpec:
    return ArgSpec(ArgKind.FLAG, param=param, flag=token)


def option(param: str, token: str) -> ArgSpec:
    return ArgSpec(ArgKind.OPTION, param=param, flag=token)


def repeated(param: str, token: str) -> ArgSpec:
    return ArgSpec(ArgKind.REPEATED, param=param, flag=token)


def extras(param: str) -> ArgSpec:
    return ArgSpec(ArgKind.EXTRAS, param=param)


def positional(param: str, required: bool = True) -> ArgSpec:
    return ArgSpec(ArgKind.POSITIONAL, param=param, required=required)


@dataclass(frozen=True)
class OperationSpec:
    """One tool: its parameters, argv grammar and result wording."""

    name: str
    description: str
    params_model: Type[BaseModel]
    args: Tuple[ArgSpec, ...]
    failure_prefix: str
    success_message: Optional[str] = None
    always_confirm: bool = False
    requires_one_of: Tuple[str, ...] = ()

    def input_schema(self) -> Dict[str, Any]:
        return self.params_model.model_json_schema()

    def confirmation(self, params: Mapping[str, Any]) -> Optional[str]:
        """Canned text for an empty (or ignored) stdout."""
        if self.success_message is None:
            return None
        return self.success_message.format(**params)


OPERATIONS: Tuple[OperationSpec, ...] = (
    OperationSpec(
        name="get-devices",
        description="Get a list of connected Android devices",
        params_model=GetDevicesParams,
        args=(literal("devices"), flag("show_details", "-l")),
        failure_prefix="Failed to get device list",
    ),
    OperationSpec(
        name="list-packages",
        description="Get a list of installed applications",
        params_model=ListPackagesParams,
        args=(
            literal("shell", "pm", "list", "packages"),
            flag("show_path", "-f"),
            flag("show_disabled", "-d"),
            flag("show_enabled", "-e"),
            flag("show_system", "-s"),
            flag("show_third_party", "-3"),
            flag("show_installer", "-i"),
            flag("include_uninstalled", "-u"),
        ),
        failure_prefix="Failed to get package list",
    ),
    OperationSpec(
        name="input-text",
        description="Input text to the connected Android device",
        params_model=InputTextParams,
        args=(literal("shell", "input", "text"), positional("text")),
        failure_prefix="Failed to input text",
        success_message="Text input completed successfully",
        always_confirm=True,
    ),
    OperationSpec(
        name="help",
        description="Show ADB help information",
        params_model=NoParams,
        args=(literal("help"),),
        failure_prefix="Failed to get ADB help",
    ),
    OperationSpec(
        name="kill-server",
        description="Kill the ADB server process",
        params_model=NoParams,
        args=(literal("kill-server"),),
        failure_prefix="Failed to kill ADB server",
        success_message="ADB server has been killed successfully",
        always_confirm=True,
    ),
    OperationSpec(
        name="start-server",
        description="Start the ADB server process",
        params_model=NoParams,
        args=(literal("start-server"),),
        failure_prefix="Failed to start ADB server",
        success_message="ADB server has been started successfully",
        always_confirm=True,
    ),
    OperationSpec(
        name="install-apk",
        description="Install an APK file to the device",
        params_model=InstallApkParams,
        args=(
            literal("install"),
            flag("allow_reinstall", "-r"),
            flag("allow_test_packages", "-t"),
            flag("allow_downgrade", "-d"),
            flag("grant_permissions", "-g"),
            positional("apk_path"),
        ),
        failure_prefix="Failed to install APK",
    ),
    OperationSpec(
        name="uninstall-apk",
        description="Uninstall an application from the device",
        params_model=UninstallApkParams,
        args=(literal("uninstall"), flag("keep_data", "-k"), positional("package_name")),
        failure_prefix="Failed to uninstall package",
        success_message="Package uninstalled successfully",
    ),
    OperationSpec(
        name="clear-app-data",
        description="Clear application data for a specific package",
        params_model=PackageParams,
        args=(literal("shell", "pm", "clear"), positional("package_name")),
        failure_prefix="Failed to clear application data",
        success_message="Application data cleared successfully",
    ),
    OperationSpec(
        name="pull",
        description="Pull a file from the Android device to the local machine",
        params_model=PullParams,
        args=(literal("pull"), positional("remote_path"), positional("local_path", required=False)),
        failure_prefix="Failed to pull file",
    ),
    OperationSpec(
        name="push",
        description="Push a file from the local machine to the Android device",
        params_model=PushParams,
        args=(literal("push"), positional("local_path"), positional("remote_path")),
        failure_prefix="Failed to push file",
    ),
    OperationSpec(
        name="screencap",
        description="Take a screenshot of the device display",
        params_model=ScreencapParams,
        args=(literal("shell", "screencap"), flag("use_png", "-p"), positional("remote_path")),
        failure_prefix="Failed to capture screenshot",
        success_message="Screenshot captured successfully",
    ),
    OperationSpec(
        name="rm",
        description="Remove a file from the Android device",
        params_model=RemoveParams,
        args=(
            literal("shell", "rm"),
            flag("force", "-f"),
            flag("recursive", "-r"),
            positional("path"),
        ),
        failure_prefix="Failed to remove file",
        success_message="File removed successfully",
    ),
    OperationSpec(
        name="reset-permissions",
        description="Reset all permissions for a specific package",
        params_model=PackageParams,
        args=(literal("shell", "pm", "reset-permissions", "-p"), positional("package_name")),
        failure_prefix="Failed to reset permissions",
        success_message="Permissions reset successfully",
    ),
    OperationSpec(
        name="grant-permission",
        description="Grant a specific permission to an app",
        params_model=PermissionParams,
        args=(literal("shell", "pm", "grant"), positional("package_name"), positional("permission")),
        failure_prefix="Failed to grant permission",
        success_message="Permission {permission} granted successfully to {package_name}",
    ),
    OperationSpec(
        name="revoke-permission",
        description="Revoke a specific permission from an app",
        params_model=PermissionParams,
        args=(literal("shell", "pm", "revoke"), positional("package_name"), positional("permission")),
        failure_prefix="Failed to revoke permission",
        success_message="Permission {permission} revoked successfully from {package_name}",
    ),
    OperationSpec(
        name="start-activity",
        description="Start an activity using activity manager (am start)",
        params_model=StartActivityParams,
        args=(
            literal("shell", "am", "start"),
            flag("wait_for_launch", "-W"),
            flag("debuggable", "-D"),
            flag("stop_app", "-S"),
            option("action", "-a"),
            option("data", "-d"),
            option("mime_type", "-t"),
            repeated("category", "-c"),
            repeated("flags", "-f"),
            extras("extras"),
            positional("component", required=False),
        ),
        failure_prefix="Failed to start activity",
        success_message="Activity started successfully",
        requires_one_of=("component", "action"),
    ),
)

OPERATIONS_BY_NAME: Dict[str, OperationSpec] = {op.name: op for op in OPERATIONS}


def get_operation(name: str) -> Optional[OperationSpec]:
    return OPERATIONS_BY_NAME.get(name)
