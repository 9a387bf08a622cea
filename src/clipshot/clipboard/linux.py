import os
import shutil
from typing import Callable, List, Optional

from clipshot.clipboard.base import ClipboardBackend


class LinuxClipboard(ClipboardBackend):
    _IMAGE_TARGETS = (
        "image/png",
        "image/jpeg",
        "image/jpg",
        "image/bmp",
        "image/webp",
    )

    def _read_image(self) -> Optional[bytes]:
        strategies = (
            self._from_wayland,
            self._from_xclip,
        )

        for strategy in strategies:
            result = strategy()
            if result:
                return result
        return None

    def _from_wayland(self) -> Optional[bytes]:
        if not self._use_wayland():
            return None

        types = self._parse_type_list(
            self._run_command(["wl-paste", "--list-types"], timeout=self.read_timeout)
        )

        def reader(target: str) -> Optional[bytes]:
            return self._run_command(
                ["wl-paste", "--type", target], timeout=self.read_timeout)

        return self._extract_image(types, reader)

    def _from_xclip(self) -> Optional[bytes]:
        if not shutil.which("xclip"):
            return None

        types = self._parse_type_list(
            self._run_command(
                ["xclip", "-selection", "clipboard", "-t", "TARGETS", "-o"],
                timeout=self.read_timeout,
            )
        )

        def reader(target: str) -> Optional[bytes]:
            return self._run_command(
                ["xclip", "-selection", "clipboard", "-t", target, "-o"],
                timeout=self.read_timeout,
            )

        return self._extract_image(types, reader)

    def _extract_image(
        self,
        types: List[str],
        reader: Callable[[str], Optional[bytes]],
    ) -> Optional[bytes]:
        # Text on the clipboard must not be read as an (empty) image.
        advertised = {target.lower(): target for target in types}
        for wanted in self._IMAGE_TARGETS:
            if wanted in advertised:
                data = reader(advertised[wanted])
                if data:
                    return data
        return None

    def _parse_type_list(self, data: Optional[bytes]) -> List[str]:
        if not data:
            return []
        text = data.decode("utf-8", errors="ignore")
        return [line.strip() for line in text.splitlines() if line.strip()]

    def _use_wayland(self) -> bool:
        return bool(os.environ.get("WAYLAND_DISPLAY")) and shutil.which("wl-paste") is not None

    def missing_tools(self) -> List[str]:
        if shutil.which("wl-paste") or shutil.which("xclip"):
            return []
        return ["wl-paste or xclip"]

    def _write_text(self, text: str) -> bool:
        if os.environ.get("WAYLAND_DISPLAY") and shutil.which("wl-copy"):
            return self._pipe_text(["wl-copy"], text)
        elif shutil.which("xclip"):
            return self._pipe_text(["xclip", "-selection", "clipboard"], text)
        return False
