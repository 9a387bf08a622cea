from dataclasses import dataclass
from typing import Optional


@dataclass
class LastSeenState:
    """Per-channel memory of the last image handed to delivery. Never persisted."""
    fingerprint: Optional[str] = None
    screenshot_mtime: Optional[float] = None
