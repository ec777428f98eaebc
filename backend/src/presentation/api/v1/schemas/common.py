"""
Response Envelope
Every endpoint answers {"success": ..., "data": ..., "message": ...}
"""
import math
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope"""

    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error envelope"""

    success: bool = False
    message: str


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0
