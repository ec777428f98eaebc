"""
JWT Service Implementation
HS256 with the configured secret, or RS256 when a key pair is configured
"""
from datetime import datetime, timedelta, timezone
from typing import Dict
from uuid import UUID

from jose import jwt, JWTError
from loguru import logger

from core.config import settings
from core.exceptions import AuthenticationException
from application.services.auth.interfaces import IJwtService


class JwtService(IJwtService):
    """JWT service backed by python-jose"""

    def __init__(self):
        if settings.JWT_PRIVATE_KEY and settings.JWT_PUBLIC_KEY:
            self.algorithm = "RS256"
            self.signing_key = settings.JWT_PRIVATE_KEY
            self.verifying_key = settings.JWT_PUBLIC_KEY
        else:
            self.algorithm = settings.JWT_ALGORITHM
            self.signing_key = settings.JWT_SECRET_KEY
            self.verifying_key = settings.JWT_SECRET_KEY

    def create_access_token(self, user_id: UUID) -> str:
        """Create access token"""
        return self._encode(
            user_id,
            "access",
            timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
        )

    def create_refresh_token(self, user_id: UUID) -> str:
        """Create refresh token"""
        return self._encode(
            user_id,
            "refresh",
            timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS),
        )

    def verify_token(self, token: str) -> Dict:
        """Verify and decode token"""
        try:
            return jwt.decode(token, self.verifying_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"JWT verification failed: {str(e)}")
            raise AuthenticationException("Invalid or expired token")

    def _encode(self, user_id: UUID, token_type: str, lifetime: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "exp": now + lifetime,
            "iat": now,
            "type": token_type,
        }
        return jwt.encode(payload, self.signing_key, algorithm=self.algorithm)
