import logging
from pathlib import Path

from clipshot.delivery.base import DeliverySink
from clipshot.models.delivery import DeliveryResult

logger = logging.getLogger(__name__)


class LocalSink(DeliverySink):

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = Path(base_dir).expanduser().absolute()

    def deliver(self, payload: bytes, filename: str) -> DeliveryResult:
        file_path = self.base_dir / filename
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(payload)
        except OSError as e:
            logger.debug(f"Failed to save {file_path}: {e}")
            return DeliveryResult(success=False, path=str(file_path), error=str(e))
        return DeliveryResult(success=True, path=str(file_path))

    def describe(self) -> str:
        return str(self.base_dir)
