"""
Rate limiting
slowapi limiter keyed by client address
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from core.config import settings


limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.RATE_LIMIT_ENABLED,
)

DEFAULT_LIMIT = f"{settings.RATE_LIMIT_PER_MINUTE}/minute"
