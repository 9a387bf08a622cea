from pathlib import Path
from typing import Optional

from clipshot.clipboard.powershell import PowerShellClipboard


class WSLClipboard(PowerShellClipboard):
    required_tools = ("powershell.exe", "clip.exe", "wslpath")

    def _to_local_path(self, windows_path: str) -> Optional[Path]:
        output = self._run_command(
            ["wslpath", "-u", windows_path], timeout=self.read_timeout)
        if not output:
            return None
        translated = output.decode("utf-8", errors="ignore").strip()
        return Path(translated) if translated else None

    def _write_text(self, text: str) -> bool:
        # clip.exe decodes BOM-less input with the OEM code page.
        return self._pipe_text(["clip.exe"], text, encoding="utf-16")
