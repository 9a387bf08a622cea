from typing import List, Optional

try:
    from AppKit import NSPasteboard, NSPasteboardTypeString
    HAS_APPKIT = True
except ImportError:
    HAS_APPKIT = False

from clipshot.clipboard.base import ClipboardBackend


class MacOSClipboard(ClipboardBackend):
    required_tools = ("pngpaste",)

    def _read_image(self) -> Optional[bytes]:
        # pngpaste exits non-zero when the clipboard holds no image.
        return self._run_command(["pngpaste", "-"], timeout=self.read_timeout)

    def missing_tools(self) -> List[str]:
        missing = super().missing_tools()
        if not HAS_APPKIT:
            missing.append("AppKit (pyobjc-framework-Cocoa)")
        return missing

    def _write_text(self, text: str) -> bool:
        if not HAS_APPKIT:
            return False

        pasteboard = NSPasteboard.generalPasteboard()
        pasteboard.clearContents()
        return bool(pasteboard.setString_forType_(text, NSPasteboardTypeString))
