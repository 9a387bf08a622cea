import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class ClipboardBackend(ABC):
    """Platform clipboard access: read the current image, write text back.

    Both directions are best effort. ``acquire`` returns ``None`` for "no image"
    and for any tool failure alike; ``write`` returns ``False`` instead of raising.
    """

    required_tools: Tuple[str, ...] = ()

    def __init__(self, read_timeout: float = 5.0, write_timeout: float = 2.0) -> None:
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout

    def acquire(self) -> Optional[bytes]:
        try:
            payload = self._read_image()
        except Exception as e:
            logger.debug(f"Clipboard read failed: {e}")
            return None
        return payload or None

    def write(self, text: str) -> bool:
        try:
            return bool(self._write_text(text))
        except Exception as e:
            logger.debug(f"Clipboard write failed: {e}")
            return False

    def missing_tools(self) -> List[str]:
        return [tool for tool in self.required_tools if shutil.which(tool) is None]

    @abstractmethod
    def _read_image(self) -> Optional[bytes]:
        pass

    @abstractmethod
    def _write_text(self, text: str) -> bool:
        pass

    def _run_command(self, command: Sequence[str], timeout: float) -> Optional[bytes]:
        try:
            result = subprocess.run(
                list(command),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
                timeout=timeout,
            )
            return result.stdout
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError):
            return None

    def _pipe_text(self, command: Sequence[str], text: str, encoding: str = "utf-8") -> bool:
        # Copy tools like xclip fork to own the selection; inheriting a pipe
        # would keep us waiting for the fork, so output goes to DEVNULL.
        try:
            subprocess.run(
                list(command),
                input=text.encode(encoding),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=True,
                timeout=self.write_timeout,
            )
            return True
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError):
            return False
