from typing import Type

from clipshot.clipboard.base import ClipboardBackend
from clipshot.environment import Environment


def get_clipboard_class(environment: Environment) -> Type[ClipboardBackend]:
    if environment == Environment.WINDOWS:
        from clipshot.clipboard.windows import WindowsClipboard
        return WindowsClipboard
    elif environment == Environment.WSL:
        from clipshot.clipboard.wsl import WSLClipboard
        return WSLClipboard
    elif environment == Environment.MACOS:
        from clipshot.clipboard.macos import MacOSClipboard
        return MacOSClipboard
    else:
        from clipshot.clipboard.linux import LinuxClipboard
        return LinuxClipboard


def get_clipboard(
    environment: Environment,
    read_timeout: float = 5.0,
    write_timeout: float = 2.0,
) -> ClipboardBackend:
    clipboard_class = get_clipboard_class(environment)
    return clipboard_class(read_timeout=read_timeout, write_timeout=write_timeout)
