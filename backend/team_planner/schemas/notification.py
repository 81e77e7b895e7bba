from typing import List, Optional
from datetime import datetime
from uuid import UUID

from pydantic import Field

from team_planner.models.notification import NotificationType, RelatedModel
from team_planner.schemas.base import CamelModel


class NotificationResponse(CamelModel):
    id: UUID
    type: NotificationType
    title: str
    message: str
    is_read: bool
    read_at: Optional[datetime] = None
    related_id: Optional[UUID] = None
    related_model: Optional[RelatedModel] = None
    processed_at: Optional[datetime] = None
    is_actionable: bool = False
    created_at: Optional[datetime] = None


class NotificationListResponse(CamelModel):
    success: bool = True
    data: List[NotificationResponse] = Field(default_factory=list)


class NotificationReadState(CamelModel):
    id: UUID
    is_read: bool
    read_at: Optional[datetime] = None


class NotificationReadResponse(CamelModel):
    success: bool = True
    notification: NotificationReadState
