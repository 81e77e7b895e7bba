"""
Schedule Service

Admin assignment of work locations and calendar queries. Admin writes are
last-writer-wins: they update rows with a plain UPDATE that bumps
``version`` without checking it, so a swap exchange holding an older copy of
the row notices the change when it flushes.
"""

import logging
import uuid
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from team_planner.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from team_planner.core.validation import MONTH_PATTERN, month_bounds, require_day
from team_planner.models.notification import NotificationType, ScheduleTarget
from team_planner.models.schedule_entry import DayOff, Location, LocationType, ScheduleEntry, describe_location
from team_planner.models.user import User
from team_planner.services.dispatcher import NotificationDispatcher
from team_planner.services.notifications import NotificationService
from team_planner.services.notifier import UserContact

logger = logging.getLogger(__name__)


def calendar_map(entries: List[ScheduleEntry]) -> Dict[str, object]:
    """``{date: "office"}`` or ``{date: {"type": "dayoff", "reason": ...}}``."""
    return {entry.date: entry.to_calendar_value() for entry in entries}


class ScheduleService:
    def __init__(self, db: Session, dispatcher: Optional[NotificationDispatcher] = None):
        self.db = db
        self.dispatcher = dispatcher
        self.notifications = NotificationService(db)

    def get_user(self, user_id: UUID) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def get_user_schedule(self, user_id: UUID, month: Optional[str] = None) -> List[ScheduleEntry]:
        """Entries for a user ordered by date, optionally limited to one YYYY-MM month."""
        query = self.db.query(ScheduleEntry).filter(ScheduleEntry.user_id == user_id)
        if month:
            if not MONTH_PATTERN.match(month):
                raise InvalidInputError("Month must be in YYYY-MM format")
            start, end = month_bounds(int(month[:4]), int(month[5:]))
            query = query.filter(ScheduleEntry.date >= start, ScheduleEntry.date < end)
        return query.order_by(ScheduleEntry.date).all()

    def get_team_schedules(self, viewer_id: UUID) -> List[dict]:
        users = self.db.query(User).filter(User.is_active.is_(True)).order_by(User.name).all()
        entries = self.db.query(ScheduleEntry).filter(
            ScheduleEntry.user_id.in_([u.id for u in users])
        ).order_by(ScheduleEntry.date).all()

        by_user: Dict[UUID, List[ScheduleEntry]] = {}
        for entry in entries:
            by_user.setdefault(entry.user_id, []).append(entry)

        return [
            {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "role": user.role,
                "schedule": calendar_map(by_user.get(user.id, [])),
                "can_swap_with": user.id != viewer_id,
            }
            for user in users
        ]

    def set_schedule(self, actor: User, user_id: UUID, schedules: Dict[str, Tuple[Location, Optional[str]]]) -> int:
        """
        Upsert one entry per date for a user.

        ``schedules`` maps YYYY-MM-DD to ``(location, reason)``. The user gets a
        schedule_update notification and, if linked, a chat message.
        """
        user = self.get_user(user_id)
        if not schedules:
            raise InvalidInputError("No schedule entries supplied")
        for day in schedules:
            require_day(day)

        changes: List[Tuple[str, str]] = []
        last_entry_id = None
        for day in sorted(schedules):
            location, reason = schedules[day]
            if isinstance(location, DayOff):
                kind, reason = LocationType.DAYOFF, location.reason
            else:
                kind = LocationType(location)

            entry_id = self.db.query(ScheduleEntry.id).filter(
                ScheduleEntry.user_id == user.id, ScheduleEntry.date == day
            ).scalar()
            if entry_id is not None:
                self.db.execute(
                    update(ScheduleEntry)
                    .where(ScheduleEntry.id == entry_id)
                    .values(location=kind, reason=reason, created_by=actor.id, version=ScheduleEntry.version + 1)
                    .execution_options(synchronize_session=False)
                )
            else:
                entry_id = uuid.uuid4()
                self.db.add(ScheduleEntry(
                    id=entry_id,
                    user_id=user.id,
                    date=day,
                    location=kind,
                    reason=reason,
                    created_by=actor.id,
                ))
            last_entry_id = entry_id
            changes.append((day, describe_location(DayOff(reason or "") if kind == LocationType.DAYOFF else kind)))

        if len(changes) == 1:
            day, label = changes[0]
            message = f"Your schedule for {day} was set to {label}."
        else:
            message = f"Your schedule was updated for {len(changes)} days ({changes[0][0]} to {changes[-1][0]})."
        self.notifications.create(
            user.id,
            NotificationType.SCHEDULE_UPDATE,
            "Schedule Updated",
            message,
            target=ScheduleTarget(last_entry_id) if len(changes) == 1 else None,
        )

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Schedule was modified concurrently, please try again")

        logger.info(f"{actor.email} set {len(changes)} schedule entries for {user.email}")
        if self.dispatcher:
            self.dispatcher.enqueue_schedule_update(UserContact.from_user(user), changes)
        return len(changes)

    def clear_schedule(self, actor: User, user_id: UUID, year: int, month: int) -> int:
        user = self.get_user(user_id)
        start, end = month_bounds(year, month)
        deleted = self.db.query(ScheduleEntry).filter(
            ScheduleEntry.user_id == user.id,
            ScheduleEntry.date >= start,
            ScheduleEntry.date < end,
        ).delete(synchronize_session=False)
        self.db.commit()
        logger.info(f"{actor.email} cleared {deleted} schedule entries for {user.email} ({year}-{month:02d})")
        return deleted
