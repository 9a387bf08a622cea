import io
import logging
import time
from typing import Optional

import win32clipboard as wc
from PIL import ImageGrab

from clipshot.clipboard.powershell import PowerShellClipboard

logger = logging.getLogger(__name__)


class WindowsClipboard(PowerShellClipboard):
    powershell = "powershell"

    def _read_image(self) -> Optional[bytes]:
        try:
            clipboard_data = ImageGrab.grabclipboard()
        except Exception as e:
            logger.debug(f"ImageGrab failed, using PowerShell helper: {e}")
            return super()._read_image()

        # A list means files were copied, not image data.
        if clipboard_data is None or not hasattr(clipboard_data, "save"):
            return None

        output = io.BytesIO()
        clipboard_data.save(output, format="PNG")
        return output.getvalue()

    def _write_text(self, text: str) -> bool:
        opened = False
        for _ in range(3):
            try:
                wc.OpenClipboard()
                opened = True
                break
            except Exception:
                time.sleep(0.05)

        if not opened:
            return False

        try:
            wc.EmptyClipboard()
            wc.SetClipboardData(wc.CF_UNICODETEXT, text)
            return True
        finally:
            try:
                wc.CloseClipboard()
            except Exception:
                pass
