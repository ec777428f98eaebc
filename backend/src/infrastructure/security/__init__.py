"""Security adapters"""

from .jwt_service import JwtService
from .password_hasher import BcryptPasswordHasher

__all__ = ["JwtService", "BcryptPasswordHasher"]
