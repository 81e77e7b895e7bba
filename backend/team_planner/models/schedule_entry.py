from dataclasses import dataclass
from typing import Union
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Uuid, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
import uuid

from team_planner.core.database import Base


class LocationType(str, enum.Enum):
    OFFICE = "office"
    REMOTE = "remote"
    VACATION = "vacation"
    SICK = "sick"
    DAYOFF = "dayoff"


@dataclass(frozen=True)
class DayOff:
    """Structured location: a day off with its reason."""
    reason: str = ""

    type = LocationType.DAYOFF


# A work location is either a plain kind or a day off carrying a reason
Location = Union[LocationType, DayOff]


def describe_location(location: Location) -> str:
    """Human-readable label, e.g. ``remote`` or ``dayoff (moving house)``."""
    if isinstance(location, DayOff):
        return f"dayoff ({location.reason})" if location.reason else "dayoff"
    return location.value


class ScheduleEntry(Base):
    """One user's work location for one calendar day."""

    __tablename__ = "schedule_entries"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_schedule_entries_user_date"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(String(10), nullable=False)  # YYYY-MM-DD
    location = Column(SQLEnum(LocationType, values_callable=lambda obj: [e.value for e in obj]), nullable=False)
    reason = Column(String(500), nullable=True)
    created_by = Column(Uuid, ForeignKey("users.id"), nullable=False)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    user = relationship("User", back_populates="schedule_entries", foreign_keys=[user_id])
    creator = relationship("User", foreign_keys=[created_by])

    @property
    def location_value(self) -> Location:
        if self.location == LocationType.DAYOFF:
            return DayOff(self.reason or "")
        return LocationType(self.location)

    def to_calendar_value(self):
        """Calendar map value: a plain string, or ``{type, reason}`` for a day off with a reason."""
        location = self.location_value
        if isinstance(location, DayOff):
            if location.reason:
                return {"type": location.type.value, "reason": location.reason}
            return location.type.value
        return location.value

    def __repr__(self):
        return f"<ScheduleEntry(user_id={self.user_id}, date={self.date}, location={self.location})>"
