"""Match orchestration services"""

from .interfaces import IMatchService
__all__ = ["IMatchService"]
