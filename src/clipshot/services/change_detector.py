import hashlib
from typing import Optional

from clipshot.models.state import LastSeenState


def fingerprint(payload: bytes) -> str:
    return hashlib.md5(payload).hexdigest()


class ChangeDetector:
    """Decides whether acquired bytes differ from the last image handed on.

    The fingerprint is recorded as soon as an image is judged new, before
    delivery runs, so an image whose delivery failed is not retried.
    """

    def __init__(self, state: Optional[LastSeenState] = None) -> None:
        self.state = state or LastSeenState()

    def seed(self, payload: Optional[bytes]) -> None:
        if payload:
            self.state.fingerprint = fingerprint(payload)

    def should_deliver(self, payload: Optional[bytes]) -> bool:
        if not payload:
            return False

        current = fingerprint(payload)
        if current == self.state.fingerprint:
            return False

        self.state.fingerprint = current
        return True
