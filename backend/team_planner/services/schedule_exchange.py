"""
Schedule Exchange

Swaps the location of two users' schedule entries for one date. Both rows
are read with ``FOR UPDATE`` (in user-id order, so two exchanges over the
same pair lock in the same order) and written under the mapper's
``version`` check: a concurrent write to either row makes the flush raise
``StaleDataError`` and the caller's transaction is rolled back whole.
"""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from team_planner.models.schedule_entry import ScheduleEntry

logger = logging.getLogger(__name__)


class ScheduleExchange:
    def __init__(self, db: Session):
        self.db = db

    def exchange(self, first_user_id: UUID, second_user_id: UUID, day: str) -> bool:
        """
        Exchange the two entries in place.

        Returns False, touching nothing, when either user has no entry for
        the day. Nothing is committed here.
        """
        entries = self.db.query(ScheduleEntry).filter(
            ScheduleEntry.user_id.in_([first_user_id, second_user_id]),
            ScheduleEntry.date == day,
        ).order_by(ScheduleEntry.user_id).with_for_update().all()

        by_user = {entry.user_id: entry for entry in entries}
        first = by_user.get(first_user_id)
        second = by_user.get(second_user_id)
        if first is None or second is None:
            logger.warning(
                f"Schedule exchange skipped for {day}: "
                f"{'requester' if first is None else 'target'} has no schedule entry"
            )
            return False

        # Location and its reason travel together
        first_value = (first.location, first.reason)
        second_value = (second.location, second.reason)
        if first_value == second_value:
            return True

        first.location, first.reason = second_value
        second.location, second.reason = first_value
        logger.info(f"Schedule exchange staged for {day}: {first.user_id} <-> {second.user_id}")
        return True
