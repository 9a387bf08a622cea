import datetime
from abc import ABC, abstractmethod
from typing import Optional

from clipshot.models.delivery import DeliveryResult


def generate_filename(now: Optional[datetime.datetime] = None) -> str:
    now = now or datetime.datetime.now(datetime.timezone.utc)
    return f"screenshot-{now.strftime('%Y-%m-%dT%H-%M-%S')}.png"


class DeliverySink(ABC):

    @abstractmethod
    def deliver(self, payload: bytes, filename: str) -> DeliveryResult:
        pass

    def describe(self) -> str:
        return self.__class__.__name__
