"""
Socket.IO Connection Registry
Maps users to their live sockets and emits to per-user rooms
"""
from typing import Any, Dict, Optional, Set
from uuid import UUID

import socketio
from loguru import logger

from application.services.realtime import IConnectionRegistry


def user_room(user_id: UUID) -> str:
    return f"user:{user_id}"


class SocketIOConnectionRegistry(IConnectionRegistry):
    """
    Connection registry backed by Socket.IO rooms

    Every socket of a user joins the room user:<id>; emitting to that room
    reaches all of them. The local maps only describe this process.
    """

    def __init__(self, sio: socketio.AsyncServer):
        self.sio = sio
        self._sockets: Dict[UUID, Set[str]] = {}
        self._owners: Dict[str, UUID] = {}

    async def register(self, user_id: UUID, sid: str) -> None:
        await self.sio.enter_room(sid, user_room(user_id))
        self._sockets.setdefault(user_id, set()).add(sid)
        self._owners[sid] = user_id
        logger.info(f"User {user_id} connected on socket {sid} ({len(self._sockets[user_id])} open)")

    async def unregister(self, sid: str) -> Optional[UUID]:
        user_id = self._owners.pop(sid, None)
        if user_id is None:
            return None

        sids = self._sockets.get(user_id)
        if sids is not None:
            sids.discard(sid)
            if not sids:
                del self._sockets[user_id]
        logger.info(f"User {user_id} disconnected socket {sid}")
        return user_id

    def lookup(self, user_id: UUID) -> Set[str]:
        return set(self._sockets.get(user_id, ()))

    async def send_to_user(self, user_id: UUID, event: str, payload: Dict[str, Any]) -> None:
        await self.sio.emit(event, payload, room=user_room(user_id))
        logger.debug(f"Emitted {event} to {user_room(user_id)}")
