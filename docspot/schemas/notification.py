from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from ..models.user import NotificationType

class NotificationResponse(BaseModel):
    id: int
    type: NotificationType
    message: str
    is_read: bool = Field(False, alias="isRead")
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    class Config:
        from_attributes = True
        populate_by_name = True

class NotificationPage(BaseModel):
    total: int
    unread: int
    skip: int
    limit: int
    items: List[NotificationResponse]

class NotificationsCleared(BaseModel):
    success: bool = True
    cleared: int
