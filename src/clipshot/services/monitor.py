"""Poll loop that turns new clipboard images into delivered files.

Each tick acquires from every channel (the clipboard, plus the screenshot
folder on macOS), and for each new image runs deliver, log, clipboard write.
Ticks never overlap: the next wait only starts once a tick has finished.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Collection, List, Optional, Set

from clipshot.clipboard.base import ClipboardBackend
from clipshot.clipboard.screenshots import ScreenshotFolderSource
from clipshot.delivery.base import DeliverySink, generate_filename
from clipshot.models.delivery import DeliveryResult, DeliveryTarget
from clipshot.services.change_detector import ChangeDetector

logger = logging.getLogger(__name__)


def unique_filename(filename: str, taken: Collection[str]) -> str:
    """Suffix ``-2``, ``-3`` ... before the extension while ``filename`` is taken."""
    if filename not in taken:
        return filename
    stem, dot, suffix = filename.rpartition(".")
    if not dot:
        stem, suffix = filename, ""
    counter = 2
    while True:
        candidate = f"{stem}-{counter}{dot}{suffix}"
        if candidate not in taken:
            return candidate
        counter += 1


@dataclass
class _Channel:
    name: str
    acquire: Callable[[], Optional[bytes]]
    detector: ChangeDetector


class MonitorService:

    def __init__(
        self,
        target: DeliveryTarget,
        sink: DeliverySink,
        clipboard: ClipboardBackend,
        screenshots: Optional[ScreenshotFolderSource] = None,
        poll_interval: float = 0.2,
        filename_factory: Callable[[], str] = generate_filename,
    ) -> None:
        self.target = target
        self.sink = sink
        self.clipboard = clipboard
        self.screenshots = screenshots
        self.poll_interval = poll_interval
        self._filename_factory = filename_factory
        self._stop_event = threading.Event()

        self._channels: List[_Channel] = [
            _Channel("clipboard", clipboard.acquire, ChangeDetector()),
        ]
        if screenshots is not None:
            self._channels.append(
                _Channel("screenshots", screenshots.acquire, ChangeDetector(screenshots.state)))

    @property
    def detectors(self) -> List[ChangeDetector]:
        return [channel.detector for channel in self._channels]

    def warn_missing_tools(self) -> None:
        for tool in self.clipboard.missing_tools():
            logger.warning(f"Warning: {tool} not found; clipboard access will be limited")

    def prime(self) -> None:
        """Remember what is already there so it is not delivered on startup."""
        for channel in self._channels:
            channel.detector.seed(channel.acquire())

    def tick(self) -> List[DeliveryResult]:
        results = []
        used: Set[str] = set()
        for channel in self._channels:
            payload = channel.acquire()
            if not channel.detector.should_deliver(payload):
                continue
            filename = unique_filename(self._filename_factory(), used)
            used.add(filename)
            results.append(self.handle_image(payload, filename))
        return results

    def handle_image(self, payload: bytes, filename: Optional[str] = None) -> DeliveryResult:
        filename = filename or self._filename_factory()
        size = round(len(payload) / 1024)
        logger.info(f"New screenshot: {filename} ({size}KB)")

        result = self.sink.deliver(payload, filename)
        if not result.success:
            if self.target.is_local:
                logger.error(f"  -> Failed to save locally: {result.error}")
            else:
                logger.error(f"  -> Failed to send to {self.target}: {result.error}")
            return result

        if self.target.is_local:
            logger.info(f"  -> Saved: {result.path}")
        else:
            logger.info(f"  -> Sent to {self.target}:{result.path}")

        if self.clipboard.write(result.path):
            logger.info("  -> Copied to clipboard")
        else:
            logger.debug("  -> Clipboard not updated")
        return result

    def run_forever(self) -> None:
        self.warn_missing_tools()
        self.prime()

        while not self._stop_event.is_set():
            try:
                self.tick()
            except Exception as e:
                logger.error(f"Error: {e}")
            self._stop_event.wait(self.poll_interval)

    def stop(self) -> None:
        self._stop_event.set()

    @property
    def is_stopped(self) -> bool:
        return self._stop_event.is_set()
