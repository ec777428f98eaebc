"""ORM Models Package"""

from .user import UserModel
from .job import JobModel
from .match import MatchModel
from .notification import NotificationModel

__all__ = [
    "UserModel",
    "JobModel",
    "MatchModel",
    "NotificationModel",
]
