from typing import Optional
from uuid import UUID

from team_planner.models.user import UserRole
from team_planner.schemas.base import CamelModel


class UserSummary(CamelModel):
    id: UUID
    name: str
    email: str


class UserResponse(UserSummary):
    role: UserRole
    discord_id: Optional[str] = None
    discord_username: Optional[str] = None
