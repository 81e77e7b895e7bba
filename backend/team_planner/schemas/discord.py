from typing import Optional

from team_planner.schemas.base import CamelModel


class DiscordLinkRequest(CamelModel):
    discord_id: Optional[str] = None
    discord_username: Optional[str] = None


class DiscordTestMessage(CamelModel):
    message: Optional[str] = None
