"""
Socket.IO Server Factory
"""
import socketio
from loguru import logger

from core.config import settings


def create_socket_server() -> socketio.AsyncServer:
    """
    Build the Socket.IO server

    With SOCKETIO_REDIS_URL set, emits are fanned out through Redis pub/sub
    so a user connected to another instance still receives them.
    """
    client_manager = None
    if settings.SOCKETIO_REDIS_URL:
        client_manager = socketio.AsyncRedisManager(settings.SOCKETIO_REDIS_URL)
        logger.info("Socket.IO using Redis client manager")

    return socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=settings.CORS_ORIGINS,
        client_manager=client_manager,
        logger=settings.DEBUG,
        engineio_logger=settings.DEBUG,
    )
