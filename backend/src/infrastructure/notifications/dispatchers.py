"""
Request-scoped notification dispatcher
"""
from fastapi import BackgroundTasks

from application.services.notifications import INotificationDelivery, INotificationDispatcher, NotificationRequest


class BackgroundTaskNotificationDispatcher(INotificationDispatcher):
    """
    Defers delivery to FastAPI background tasks

    Background tasks run after the response is sent, so the caller never
    waits on delivery. Delivery opens its own session and does not depend on
    when the request's session is closed.
    """

    def __init__(self, background_tasks: BackgroundTasks, delivery: INotificationDelivery):
        self.background_tasks = background_tasks
        self.delivery = delivery

    def dispatch(self, request: NotificationRequest) -> None:
        self.background_tasks.add_task(self.delivery.deliver, request)
