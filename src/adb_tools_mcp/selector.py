"""Device selector resolution."""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

TargetFlag = Tuple[str, ...]


@dataclass(frozen=True)
class DeviceSelector:
    """Which connected device a call targets."""

    device_id: Optional[str] = None
    use_usb: bool = False
    use_emulator: bool = False


def resolve_target(selector: DeviceSelector) -> TargetFlag:
    """Turn a selector into the global adb targeting flag.

    Precedence is device id, then USB, then emulator. An empty id counts as
    absent. The id is passed through as given; adb reports unknown serials.
    """
    if selector.device_id:
        return ("-s", selector.device_id)
    if selector.use_usb:
        return ("-d",)
    if selector.use_emulator:
        return ("-e",)
    return ()


def selector_from_params(params: Mapping[str, Any]) -> DeviceSelector:
    """Pick the device selection fields out of validated tool parameters."""
    return DeviceSelector(
        device_id=params.get("device_id"),
        use_usb=bool(params.get("use_usb")),
        use_emulator=bool(params.get("use_emulator")),
    )
