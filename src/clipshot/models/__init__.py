from clipshot.models.delivery import DeliveryResult, DeliveryTarget, LOCAL_MARKER
from clipshot.models.state import LastSeenState

__all__ = [
    'DeliveryResult',
    'DeliveryTarget',
    'LastSeenState',
    'LOCAL_MARKER',
]
