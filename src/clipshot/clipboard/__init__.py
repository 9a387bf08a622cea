"""
Platform clipboard access.

Each backend reads the current clipboard image and writes text back; the
factory picks one from the detected environment.
"""

from clipshot.clipboard.base import ClipboardBackend
from clipshot.clipboard.factory import get_clipboard, get_clipboard_class
from clipshot.clipboard.screenshots import ScreenshotFolderSource, resolve_screenshot_dir

__all__ = [
    'ClipboardBackend',
    'ScreenshotFolderSource',
    'get_clipboard',
    'get_clipboard_class',
    'resolve_screenshot_dir',
]
