from fastapi import APIRouter, Depends

from team_planner.api.deps import get_current_user, get_notification_service
from team_planner.core.validation import parse_id
from team_planner.models.user import User
from team_planner.schemas.notification import NotificationListResponse, NotificationReadResponse
from team_planner.services.notifications import NotificationService

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user)
):
    """
    Active notifications for the caller, newest first.

    Swap request notifications drop out once the request is resolved.
    """
    return {"data": service.list_active(current_user.id)}


@router.put("/{notification_id}/read", response_model=NotificationReadResponse)
async def mark_notification_read(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user)
):
    """Mark a notification as read."""
    notification = service.mark_read(parse_id(notification_id, "notification id"), current_user.id)
    return {"notification": notification}
