"""Notification services"""

from .interfaces import (
    INotificationDelivery,
    INotificationDispatcher,
    INotificationService,
    NotificationRequest,
)
__all__ = [
    "INotificationDelivery",
    "INotificationDispatcher",
    "INotificationService",
    "NotificationRequest",
]
