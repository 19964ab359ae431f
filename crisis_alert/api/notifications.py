"""
Notification API Endpoints

In-app notifications for the current user: alert broadcasts and incident
status or assignment changes.
"""
from fastapi import APIRouter, Depends, status

from crisis_alert.api.deps import get_current_user_context, to_http_exception
from crisis_alert.db import schemas
from crisis_alert.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=schemas.NotificationListResponse)
def get_notifications(
    unread_only: bool = False,
    user_context=Depends(get_current_user_context),
):
    """
    Get notifications for the current user, newest first.

    - **unread_only**: If true, only return unread notifications
    """
    user, _ctx = user_context
    return NotificationService().get_user_notifications(user.id, unread_only=unread_only)


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_notification_read(
    notification_id: str,
    user_context=Depends(get_current_user_context),
):
    """
    Mark a specific notification as read.
    """
    user, _ctx = user_context
    try:
        NotificationService().mark_as_read(notification_id, user.id)
    except LookupError as e:
        raise to_http_exception(e)
