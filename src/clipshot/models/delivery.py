from dataclasses import dataclass
from typing import Optional

LOCAL_MARKER = "local"


@dataclass(frozen=True)
class DeliveryTarget:
    """Where captured images go: the local folder, or an ssh host when ``host`` is set."""
    host: Optional[str] = None

    @property
    def is_local(self) -> bool:
        return self.host is None

    @classmethod
    def parse(cls, value: str) -> "DeliveryTarget":
        value = (value or "").strip()
        if not value:
            raise ValueError("delivery target must be 'local' or an ssh host")
        if value == LOCAL_MARKER:
            return cls()
        return cls(host=value)

    def __str__(self) -> str:
        return LOCAL_MARKER if self.host is None else self.host


@dataclass(frozen=True)
class DeliveryResult:
    success: bool
    path: str
    error: Optional[str] = None
