import platform
from enum import Enum
from pathlib import Path
from typing import Optional

PROC_VERSION = Path("/proc/version")


class Environment(str, Enum):
    WINDOWS = "windows"
    WSL = "wsl"
    MACOS = "macos"
    UNIX = "unix"


_LABELS = {
    Environment.WINDOWS: "Windows",
    Environment.WSL: "WSL",
    Environment.MACOS: "macOS",
    Environment.UNIX: "Native",
}


def is_wsl(version_file: Path = PROC_VERSION) -> bool:
    try:
        release = version_file.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return False
    release = release.lower()
    return "microsoft" in release or "wsl" in release


def detect_environment(
    system: Optional[str] = None,
    version_file: Path = PROC_VERSION,
) -> Environment:
    system = system or platform.system()

    if system == "Windows":
        return Environment.WINDOWS
    elif system == "Darwin":
        return Environment.MACOS
    elif system == "Linux" and is_wsl(version_file):
        return Environment.WSL
    return Environment.UNIX


def describe(environment: Environment) -> str:
    return _LABELS[environment]
