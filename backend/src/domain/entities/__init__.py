"""Domain Entities - Core business objects"""

from .user import User
from .job import Job
from .match import Match
from .notification import Notification
__all__ = ["User", "Job", "Match", "Notification"]
