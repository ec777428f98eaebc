"""
Notification Domain Entity
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from ..enums import NotificationType


@dataclass(frozen=True)
class Notification:
    """Notification addressed to one user"""

    id: UUID
    recipient_id: UUID
    type: NotificationType
    title: str
    message: str
    sender_id: Optional[UUID] = None
    data: Dict[str, Any] = field(default_factory=dict)
    read: bool = False
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
