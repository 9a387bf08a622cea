import logging
from typing import Iterable, List, Optional

import pytest

from clipshot.clipboard.base import ClipboardBackend
from clipshot.config import ClipshotConfig


class FakeClipboard(ClipboardBackend):
    """Serves a scripted sequence of reads and records every write."""

    def __init__(self, reads: Iterable[Optional[bytes]] = (), write_ok: bool = True):
        super().__init__()
        self.reads: List[Optional[bytes]] = list(reads)
        self.writes: List[str] = []
        self.write_ok = write_ok

    def _read_image(self) -> Optional[bytes]:
        if not self.reads:
            return None
        return self.reads.pop(0)

    def _write_text(self, text: str) -> bool:
        self.writes.append(text)
        return self.write_ok


@pytest.fixture
def fake_clipboard():
    return FakeClipboard


@pytest.fixture
def config(tmp_path):
    return ClipshotConfig(
        log_dir=tmp_path / "logs",
        local_dir=tmp_path / "shots",
        background=True,
    )


@pytest.fixture
def restore_clipshot_logger():
    logger = logging.getLogger("clipshot")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate
