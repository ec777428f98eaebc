"""Notification delivery adapters"""

from .delivery import NotificationDeliveryService, notification_payload
from .dispatchers import BackgroundTaskNotificationDispatcher

__all__ = [
    "NotificationDeliveryService",
    "BackgroundTaskNotificationDispatcher",
    "notification_payload",
]
