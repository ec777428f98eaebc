"""Socket.IO event handlers"""

from .events import register_socket_handlers

__all__ = ["register_socket_handlers"]
