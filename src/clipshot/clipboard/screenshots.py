"""Watch the macOS screenshot folder for newly written captures.

Screenshots saved with Cmd+Shift+3/4/5 never touch the clipboard, so on
macOS the monitor also polls the folder they land in.
"""

import logging
import subprocess
import time
from pathlib import Path
from typing import Callable, Optional, Tuple

from clipshot.models.state import LastSeenState

logger = logging.getLogger(__name__)

# Delivered files are always named .png.
IMAGE_SUFFIXES = {".png"}


def resolve_screenshot_dir(
    override: Optional[Path] = None,
    timeout: float = 2.0,
) -> Path:
    """Return the folder macOS saves screenshots to.

    Uses ``override`` when given, then the ``com.apple.screencapture``
    ``location`` default, then ``~/Desktop``.
    """
    if override is not None:
        return Path(override).expanduser()

    try:
        result = subprocess.run(
            ["defaults", "read", "com.apple.screencapture", "location"],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            check=True,
            timeout=timeout,
        )
        location = result.stdout.decode("utf-8", errors="ignore").strip()
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError):
        location = ""

    if location:
        candidate = Path(location).expanduser()
        if candidate.is_dir():
            return candidate
    return Path.home() / "Desktop"


class ScreenshotFolderSource:

    def __init__(
        self,
        directory: Path,
        state: Optional[LastSeenState] = None,
        debounce: float = 0.3,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.directory = Path(directory)
        self.state = state or LastSeenState()
        self.debounce = debounce
        self._clock = clock

    def acquire(self) -> Optional[bytes]:
        newest = self._newest_file()
        if newest is None:
            return None

        path, mtime = newest
        # The file may still be being written.
        if self._clock() - mtime < self.debounce:
            return None
        if self.state.screenshot_mtime is not None and mtime <= self.state.screenshot_mtime:
            return None

        try:
            payload = path.read_bytes()
        except OSError as e:
            logger.debug(f"Cannot read screenshot {path}: {e}")
            return None

        self.state.screenshot_mtime = mtime
        return payload or None

    def _newest_file(self) -> Optional[Tuple[Path, float]]:
        newest: Optional[Tuple[Path, float]] = None
        try:
            entries = list(self.directory.iterdir())
        except OSError:
            return None

        for entry in entries:
            # macOS writes in-progress captures as hidden dot files.
            if entry.name.startswith(".") or entry.suffix.lower() not in IMAGE_SUFFIXES:
                continue
            try:
                if not entry.is_file():
                    continue
                mtime = entry.stat().st_mtime
            except OSError:
                continue
            if newest is None or mtime > newest[1]:
                newest = (entry, mtime)
        return newest