"""
In-app notification store operations.

Swap request notifications are "active" (the client may offer Approve/Deny)
only while ``processed_at`` is unset; resolving the linked request stamps it.
"""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from team_planner.config import get_settings
from team_planner.core.exceptions import NotFoundError
from team_planner.models.notification import (
    Notification,
    NotificationTarget,
    NotificationType,
    RelatedModel,
)

settings = get_settings()


class NotificationService:
    """Create, query and acknowledge notifications. Callers own the commit."""

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        user_id: UUID,
        notification_type: NotificationType,
        title: str,
        message: str,
        target: NotificationTarget = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            type=notification_type,
            title=title,
            message=message,
            is_read=False,
        )
        notification.target = target
        self.db.add(notification)
        return notification

    def mark_swap_request_processed(self, swap_request_id: UUID, when: Optional[datetime] = None) -> int:
        """Retire the actionable notification(s) for a resolved swap request."""
        when = when or datetime.now(timezone.utc)
        notifications = self.db.query(Notification).filter(
            Notification.related_id == swap_request_id,
            Notification.related_model == RelatedModel.SWAP_REQUEST,
            Notification.type == NotificationType.SWAP_REQUEST,
            Notification.processed_at.is_(None),
        ).all()

        for notification in notifications:
            notification.is_read = True
            if notification.read_at is None:
                notification.read_at = when
            notification.processed_at = when
        return len(notifications)

    def list_active(self, user_id: UUID, limit: Optional[int] = None) -> List[Notification]:
        """Newest first; processed swap requests are left out."""
        limit = min(limit or settings.notification_list_limit, settings.notification_list_limit)
        return self.db.query(Notification).filter(
            Notification.user_id == user_id,
            or_(
                Notification.type != NotificationType.SWAP_REQUEST,
                Notification.processed_at.is_(None),
            ),
        ).order_by(Notification.created_at.desc()).limit(limit).all()

    def mark_read(self, notification_id: UUID, user_id: UUID) -> Notification:
        notification = self.db.query(Notification).filter(
            Notification.id == notification_id,
            Notification.user_id == user_id,
        ).first()
        if not notification:
            raise NotFoundError("Notification not found")

        if not notification.is_read:
            notification.is_read = True
            notification.read_at = datetime.now(timezone.utc)
            self.db.commit()
            self.db.refresh(notification)
        return notification
