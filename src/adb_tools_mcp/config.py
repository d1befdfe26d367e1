"""Server configuration, built once at startup."""

import os
import shutil
from dataclasses import dataclass
from typing import Optional

ADB_PATH_ENV = "ADB_PATH"


@dataclass(frozen=True)
class ServerConfig:
    adb_path: str
    # Seconds before the server abandons a call; None waits indefinitely.
    timeout: Optional[float] = None


def find_adb_path(explicit: Optional[str] = None) -> Optional[str]:
    """Pick the adb binary: explicit argument, then $ADB_PATH, then PATH."""
    if explicit:
        return explicit
    from_env = os.environ.get(ADB_PATH_ENV)
    if from_env:
        return from_env
    return shutil.which("adb")
