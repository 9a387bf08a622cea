"""Clipboard image access through a PowerShell helper script.

Used from WSL, where the Windows clipboard is only reachable through
``powershell.exe``, and as the fallback reader on native Windows.
"""

import base64
import logging
from pathlib import Path
from typing import Optional

from clipshot.clipboard.base import ClipboardBackend

logger = logging.getLogger(__name__)

# Prints FILE:<path> after saving the image to a temp file; prints the PNG
# inline as B64:<data> only when the temp file cannot be written.
READ_IMAGE_SCRIPT = r"""
$ProgressPreference = 'SilentlyContinue'
Add-Type -AssemblyName System.Windows.Forms
Add-Type -AssemblyName System.Drawing
$img = [System.Windows.Forms.Clipboard]::GetImage()
if ($img -eq $null) { exit 0 }
$path = Join-Path ([System.IO.Path]::GetTempPath()) 'clipshot-clipboard.png'
try {
  $img.Save($path, [System.Drawing.Imaging.ImageFormat]::Png)
  Write-Output ('FILE:' + $path)
} catch {
  $ms = New-Object System.IO.MemoryStream
  $img.Save($ms, [System.Drawing.Imaging.ImageFormat]::Png)
  Write-Output ('B64:' + [Convert]::ToBase64String($ms.ToArray()))
}
"""

FILE_PREFIX = "FILE:"
INLINE_PREFIX = "B64:"


def encode_command(script: str) -> str:
    """Encode a script for ``-EncodedCommand`` (base64 of UTF-16LE)."""
    return base64.b64encode(script.encode("utf-16-le")).decode("ascii")


class PowerShellClipboard(ClipboardBackend):
    powershell = "powershell.exe"

    def _read_image(self) -> Optional[bytes]:
        output = self._run_command(
            [self.powershell, "-NoProfile", "-NonInteractive", "-STA",
             "-EncodedCommand", encode_command(READ_IMAGE_SCRIPT)],
            timeout=self.read_timeout,
        )
        if not output:
            return None
        return self._parse_helper_output(output.decode("utf-8", errors="ignore"))

    def _parse_helper_output(self, text: str) -> Optional[bytes]:
        for line in text.splitlines():
            line = line.strip()
            if line.startswith(FILE_PREFIX):
                return self._read_helper_file(line[len(FILE_PREFIX):].strip())
            if line.startswith(INLINE_PREFIX):
                try:
                    return base64.b64decode(line[len(INLINE_PREFIX):], validate=True)
                except ValueError:
                    logger.debug("PowerShell helper returned malformed base64")
                    return None
        return None

    def _read_helper_file(self, windows_path: str) -> Optional[bytes]:
        local_path = self._to_local_path(windows_path)
        if local_path is None:
            return None
        try:
            return local_path.read_bytes()
        except OSError as e:
            logger.debug(f"Cannot read helper output {local_path}: {e}")
            return None
        finally:
            try:
                local_path.unlink()
            except OSError:
                pass

    def _to_local_path(self, windows_path: str) -> Optional[Path]:
        return Path(windows_path)
