from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from .common import UtcDatetime


class NotificationBase(BaseModel):
    user_id: str
    title: str
    message: str
    type: str
    read: bool = False
    data: Optional[Dict[str, Any]] = None


class NotificationCreate(NotificationBase):
    pass


class Notification(NotificationBase):
    id: str
    created_at: Optional[UtcDatetime] = None
    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    notifications: List[Notification]
    unread_count: int
    total_count: int
