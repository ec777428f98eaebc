"""Realtime delivery over Socket.IO"""

from .connection_registry import SocketIOConnectionRegistry, user_room
from .socket_server import create_socket_server

__all__ = ["SocketIOConnectionRegistry", "create_socket_server", "user_room"]
