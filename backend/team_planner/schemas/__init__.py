from team_planner.schemas.base import CamelModel, MessageResponse
from team_planner.schemas.user import UserSummary, UserResponse
from team_planner.schemas.swap import (
    SwapRequestCreate,
    SwapRequestRespond,
    SwapRequestCreatedResponse,
    SwapRequestResolvedResponse,
    SwapRequestListResponse,
    SwapRequestCancelledResponse,
)
from team_planner.schemas.notification import (
    NotificationResponse,
    NotificationListResponse,
    NotificationReadResponse,
)
from team_planner.schemas.schedule import (
    SetScheduleRequest,
    ClearScheduleRequest,
    ScheduleUpdatedResponse,
    ScheduleClearedResponse,
    TeamScheduleResponse,
)
from team_planner.schemas.discord import DiscordLinkRequest, DiscordTestMessage

__all__ = [
    "CamelModel", "MessageResponse",
    "UserSummary", "UserResponse",
    "SwapRequestCreate", "SwapRequestRespond", "SwapRequestCreatedResponse",
    "SwapRequestResolvedResponse", "SwapRequestListResponse", "SwapRequestCancelledResponse",
    "NotificationResponse", "NotificationListResponse", "NotificationReadResponse",
    "SetScheduleRequest", "ClearScheduleRequest", "ScheduleUpdatedResponse",
    "ScheduleClearedResponse", "TeamScheduleResponse",
    "DiscordLinkRequest", "DiscordTestMessage",
]
