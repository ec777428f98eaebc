"""
Socket.IO Event Handlers

Clients connect with {"auth": {"token": "<access token>"}}; the socket is
then placed in its user's room so notifications reach every open tab.
"""
from typing import Any, Awaitable, Callable, Dict, Optional

import socketio
from socketio.exceptions import ConnectionRefusedError as SocketConnectionRefused
from loguru import logger

from application.services.realtime import IConnectionRegistry
from core.exceptions import AuthenticationException
from domain.entities import User


TokenAuthenticator = Callable[[str], Awaitable[User]]


def _extract_token(auth: Optional[Dict[str, Any]]) -> Optional[str]:
    if not isinstance(auth, dict):
        return None
    token = auth.get("token")
    if isinstance(token, str) and token.lower().startswith("bearer "):
        token = token[7:]
    return token or None


def register_socket_handlers(
    sio: socketio.AsyncServer,
    registry: IConnectionRegistry,
    authenticate: TokenAuthenticator,
) -> None:
    """Attach connect/disconnect handlers to the server"""

    async def connect(sid, environ, auth=None):
        token = _extract_token(auth)
        if not token:
            logger.warning(f"Socket {sid} rejected: no token")
            raise SocketConnectionRefused("authentication required")

        try:
            user = await authenticate(token)
        except AuthenticationException as e:
            logger.warning(f"Socket {sid} rejected: {e}")
            raise SocketConnectionRefused("invalid token")

        await registry.register(user.id, sid)
        await sio.emit("authenticated", {"user_id": str(user.id)}, to=sid)

    async def disconnect(sid, *args):
        await registry.unregister(sid)

    sio.on("connect", connect)
    sio.on("disconnect", disconnect)
