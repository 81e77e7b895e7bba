from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Optional, Union
from uuid import UUID
from sqlalchemy import Column, String, ForeignKey, Boolean, DateTime, Index, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
import uuid

from team_planner.core.database import Base


class NotificationType(str, enum.Enum):
    SWAP_REQUEST = "swap_request"
    SWAP_RESPONSE = "swap_response"
    SCHEDULE_UPDATE = "schedule_update"
    GENERAL = "general"


class RelatedModel(str, enum.Enum):
    SWAP_REQUEST = "SwapRequest"
    SCHEDULE = "Schedule"


@dataclass(frozen=True)
class SwapRequestTarget:
    id: UUID


@dataclass(frozen=True)
class ScheduleTarget:
    id: UUID


# What a notification points at, resolved from (related_model, related_id)
NotificationTarget = Optional[Union[SwapRequestTarget, ScheduleTarget]]


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_read", "user_id", "is_read"),
        Index("ix_notifications_related", "related_model", "related_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type = Column(SQLEnum(NotificationType, values_callable=lambda obj: [e.value for e in obj]), default=NotificationType.GENERAL, nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(String(1000), nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    related_id = Column(Uuid, nullable=True)
    related_model = Column(SQLEnum(RelatedModel, values_callable=lambda obj: [e.value for e in obj]), nullable=True)
    processed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), server_default=func.now(), index=True)

    # Relationships
    user = relationship("User", back_populates="notifications")

    @property
    def target(self) -> NotificationTarget:
        if self.related_id is None or self.related_model is None:
            return None
        if self.related_model == RelatedModel.SWAP_REQUEST:
            return SwapRequestTarget(self.related_id)
        return ScheduleTarget(self.related_id)

    @target.setter
    def target(self, target: NotificationTarget) -> None:
        if isinstance(target, SwapRequestTarget):
            self.related_model = RelatedModel.SWAP_REQUEST
        elif isinstance(target, ScheduleTarget):
            self.related_model = RelatedModel.SCHEDULE
        else:
            self.related_model = None
            self.related_id = None
            return
        self.related_id = target.id

    @property
    def is_actionable(self) -> bool:
        """A swap request notification stays actionable until its request resolves."""
        return (
            self.type == NotificationType.SWAP_REQUEST
            and isinstance(self.target, SwapRequestTarget)
            and self.processed_at is None
        )

    def __repr__(self):
        return f"<Notification(id={self.id}, user_id={self.user_id}, type={self.type}, read={self.is_read})>"
