from typing import Dict, List, Optional, Tuple, Union
from uuid import UUID

from team_planner.models.schedule_entry import DayOff, Location, LocationType
from team_planner.models.user import UserRole
from team_planner.schemas.base import CamelModel

# Calendar value as the frontend renders it: "office" or {"type": "dayoff", "reason": ...}
CalendarValue = Union[LocationType, Dict[str, str]]


class LocationPayload(CamelModel):
    type: LocationType
    reason: Optional[str] = None

    def to_location(self) -> Tuple[Location, Optional[str]]:
        if self.type == LocationType.DAYOFF:
            return DayOff(self.reason or ""), None
        return self.type, self.reason


class SetScheduleRequest(CamelModel):
    user_id: UUID
    schedules: Dict[str, Union[LocationType, LocationPayload]]

    def to_locations(self) -> Dict[str, Tuple[Location, Optional[str]]]:
        result = {}
        for day, value in self.schedules.items():
            if isinstance(value, LocationPayload):
                result[day] = value.to_location()
            elif value == LocationType.DAYOFF:
                result[day] = (DayOff(), None)
            else:
                result[day] = (value, None)
        return result


class ClearScheduleRequest(CamelModel):
    user_id: UUID
    year: int
    month: int


class ScheduleUpdatedResponse(CamelModel):
    success: bool = True
    message: str = "Schedule updated successfully"
    updated: int


class ScheduleClearedResponse(CamelModel):
    success: bool = True
    message: str = "Schedule cleared successfully"
    deleted: int


class TeamMemberSchedule(CamelModel):
    id: UUID
    name: str
    email: str
    role: UserRole
    schedule: Dict[str, CalendarValue]
    can_swap_with: bool


class TeamScheduleResponse(CamelModel):
    success: bool = True
    data: List[TeamMemberSchedule]
