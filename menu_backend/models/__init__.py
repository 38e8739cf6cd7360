from menu_backend.models.guest import OptIn, AnalyticsEvent
from menu_backend.models.pairing_description import PairingDescription

__all__ = [
    "OptIn",
    "AnalyticsEvent",
    "PairingDescription",
]
