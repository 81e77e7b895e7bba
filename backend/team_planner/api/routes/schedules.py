from typing import Dict, Optional
from fastapi import APIRouter, Depends, Query

from team_planner.api.deps import get_current_user, get_schedule_service, require_admin
from team_planner.core.validation import parse_id
from team_planner.models.user import User
from team_planner.schemas.schedule import (
    CalendarValue,
    ClearScheduleRequest,
    ScheduleClearedResponse,
    ScheduleUpdatedResponse,
    SetScheduleRequest,
    TeamScheduleResponse,
)
from team_planner.services.schedules import ScheduleService, calendar_map

router = APIRouter()


@router.get("/my-schedule", response_model=Dict[str, CalendarValue])
async def get_my_schedule(
    month: Optional[str] = Query(None, description="Limit to one month (YYYY-MM)"),
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(get_current_user)
):
    """The caller's calendar as a ``{date: location}`` map."""
    return calendar_map(service.get_user_schedule(current_user.id, month))


@router.get("/user/{user_id}", response_model=Dict[str, CalendarValue])
async def get_user_schedule(
    user_id: str,
    month: Optional[str] = Query(None, description="Limit to one month (YYYY-MM)"),
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(require_admin)
):
    """Another user's calendar (admin only)."""
    user = service.get_user(parse_id(user_id, "user id"))
    return calendar_map(service.get_user_schedule(user.id, month))


@router.get("/team-schedules", response_model=TeamScheduleResponse)
async def get_team_schedules(
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(get_current_user)
):
    """
    Every active user with their calendar.

    ``canSwapWith`` is false for the caller's own row.
    """
    return {"success": True, "data": service.get_team_schedules(current_user.id)}


@router.post("/admin/set-schedule", response_model=ScheduleUpdatedResponse)
async def set_schedule(
    payload: SetScheduleRequest,
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(require_admin)
):
    """Assign locations for one user, one entry per date (admin only)."""
    updated = service.set_schedule(current_user, payload.user_id, payload.to_locations())
    return {"updated": updated}


@router.delete("/admin/clear-schedule", response_model=ScheduleClearedResponse)
async def clear_schedule(
    payload: ClearScheduleRequest,
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(require_admin)
):
    """Delete one user's entries for a month (admin only)."""
    deleted = service.clear_schedule(current_user, payload.user_id, payload.year, payload.month)
    return {"deleted": deleted}
