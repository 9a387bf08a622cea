"""Service layer for clipshot."""

from clipshot.services.change_detector import ChangeDetector, fingerprint
from clipshot.services.monitor import MonitorService

__all__ = ["ChangeDetector", "MonitorService", "fingerprint"]
