"""
Realtime Connection Registry Interface
Tracks which users are reachable over Socket.IO and delivers events to them
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Set
from uuid import UUID


class IConnectionRegistry(ABC):
    """Connection registry interface"""

    @abstractmethod
    async def register(self, user_id: UUID, sid: str) -> None:
        """Associate a socket with a user"""
        pass

    @abstractmethod
    async def unregister(self, sid: str) -> Optional[UUID]:
        """Forget a socket; returns the user it belonged to"""
        pass

    @abstractmethod
    def lookup(self, user_id: UUID) -> Set[str]:
        """Socket ids of a user connected to this instance"""
        pass

    def is_online(self, user_id: UUID) -> bool:
        return bool(self.lookup(user_id))

    @abstractmethod
    async def send_to_user(self, user_id: UUID, event: str, payload: Dict[str, Any]) -> None:
        """Emit an event to every connection of a user"""
        pass
