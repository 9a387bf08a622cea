"""Event log for the clipshot daemon.

Every line goes to a timestamped file under the log directory. A file is
used for at most ``max_age`` seconds before a fresh one is started; old files
are left in place for the status tooling to read.
"""

import datetime
import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from clipshot.config import ClipshotConfig

LOGGER_NAME = "clipshot"
FILE_FORMAT = "[%(asctime)s] %(message)s"
CONSOLE_FORMAT = "%(message)s"


@dataclass(frozen=True)
class LogSession:
    file_path: Path
    started_at: float


class IsoFormatter(logging.Formatter):

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        created = datetime.datetime.fromtimestamp(
            record.created, tz=datetime.timezone.utc)
        return created.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SessionFileHandler(logging.Handler):

    def __init__(
        self,
        log_dir: Path,
        max_age: float = 60 * 60,
        clock: Callable[[], float] = time.time,
        encoding: str = "utf-8",
    ) -> None:
        super().__init__()
        self.log_dir = Path(log_dir)
        self.max_age = max_age
        self.encoding = encoding
        self._clock = clock
        self.session: Optional[LogSession] = None

        # No logging is possible without this directory, so errors propagate.
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.rollover()

    @property
    def file_path(self) -> Path:
        return self.session.file_path

    def should_rollover(self) -> bool:
        if self.session is None:
            return True
        return self._clock() - self.session.started_at > self.max_age

    def rollover(self) -> LogSession:
        started_at = self._clock()
        stamp = datetime.datetime.fromtimestamp(
            started_at, tz=datetime.timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.session = LogSession(
            file_path=self.log_dir / f"clipshot-{stamp}.log",
            started_at=started_at,
        )
        return self.session

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if self.should_rollover():
                self.rollover()
            line = self.format(record)
            with self.session.file_path.open("a", encoding=self.encoding) as handle:
                handle.write(line + "\n")
        except Exception:
            self.handleError(record)


def setup_logging(
    config: ClipshotConfig,
    verbose: bool = False,
    clock: Callable[[], float] = time.time,
) -> SessionFileHandler:
    """Attach the file handler (and, unless running detached, a stdout echo).

    Raises:
        OSError: if the log directory cannot be created.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    file_handler = SessionFileHandler(
        config.log_dir, max_age=config.log_max_age, clock=clock)
    file_handler.setFormatter(IsoFormatter(FILE_FORMAT))
    logger.addHandler(file_handler)

    if not config.background:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(console_handler)

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    return file_handler
