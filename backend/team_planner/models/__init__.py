from team_planner.models.user import User, UserRole
from team_planner.models.schedule_entry import ScheduleEntry, LocationType, DayOff, Location
from team_planner.models.swap_request import SwapRequest, SwapStatus
from team_planner.models.notification import (
    Notification,
    NotificationType,
    RelatedModel,
    SwapRequestTarget,
    ScheduleTarget,
)

__all__ = [
    "User",
    "UserRole",
    "ScheduleEntry",
    "LocationType",
    "DayOff",
    "Location",
    "SwapRequest",
    "SwapStatus",
    "Notification",
    "NotificationType",
    "RelatedModel",
    "SwapRequestTarget",
    "ScheduleTarget",
]
