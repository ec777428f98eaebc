"""
Notification Endpoints
/api/v1/notifications/* routes
"""
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from domain.entities import User
from application.services.notifications import INotificationService
from presentation.api.v1.container import get_notification_service
from presentation.api.v1.dependencies import get_current_user
from presentation.api.v1.schemas.common import ApiResponse, page_count
from presentation.api.v1.schemas.notification import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)


router = APIRouter()


@router.get("/notifications", response_model=ApiResponse[NotificationListResponse])
async def list_notifications(
    unread_only: bool = Query(False),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    notification_service: INotificationService = Depends(get_notification_service)
):
    notifications, total = await notification_service.list_notifications(
        current_user.id, unread_only=unread_only, page=page, limit=limit
    )
    unread = await notification_service.unread_count(current_user.id)
    return ApiResponse(data=NotificationListResponse(
        notifications=[NotificationResponse.from_entity(n) for n in notifications],
        total=total,
        unread=unread,
        page=page,
        pages=page_count(total, limit),
    ))


@router.get("/notifications/unread-count", response_model=ApiResponse[UnreadCountResponse])
async def unread_count(
    current_user: User = Depends(get_current_user),
    notification_service: INotificationService = Depends(get_notification_service)
):
    count = await notification_service.unread_count(current_user.id)
    return ApiResponse(data=UnreadCountResponse(count=count))


@router.post("/notifications/read-all", response_model=ApiResponse[MarkAllReadResponse])
async def mark_all_read(
    current_user: User = Depends(get_current_user),
    notification_service: INotificationService = Depends(get_notification_service)
):
    updated = await notification_service.mark_all_read(current_user.id)
    return ApiResponse(data=MarkAllReadResponse(updated=updated), message="All notifications marked as read")


@router.post("/notifications/{notification_id}/read", response_model=ApiResponse[NotificationResponse])
async def mark_read(
    notification_id: UUID,
    current_user: User = Depends(get_current_user),
    notification_service: INotificationService = Depends(get_notification_service)
):
    notification = await notification_service.mark_read(current_user.id, notification_id)
    return ApiResponse(data=NotificationResponse.from_entity(notification))
