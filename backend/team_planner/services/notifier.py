"""
External Notifier

Best-effort relay of in-app notifications to chat. The in-app Notification
records are the source of truth; nothing here may fail a workflow step.

Two implementations, chosen once at start-up by ``build_notifier``:
- DiscordNotifier: direct messages (and a channel fallback) over the Discord REST API
- NullNotifier: used when no bot token is configured
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import httpx

from team_planner.config import Settings

logger = logging.getLogger(__name__)

COLOR_PENDING = 0xF59E0B
COLOR_APPROVED = 0x10B981
COLOR_DENIED = 0xEF4444
COLOR_SCHEDULE = 0x8B5CF6
COLOR_INFO = 0x3B82F6

# Transport failures plus malformed API replies
DELIVERY_ERRORS = (httpx.HTTPError, KeyError, ValueError)


@dataclass(frozen=True)
class UserContact:
    """Snapshot of a user taken before the request's session closes."""
    id: str
    name: str
    email: str
    discord_id: Optional[str] = None

    @classmethod
    def from_user(cls, user) -> "UserContact":
        return cls(id=str(user.id), name=user.name, email=user.email, discord_id=user.discord_id)


@dataclass(frozen=True)
class SwapNotice:
    """Snapshot of a swap request for out-of-band delivery."""
    id: str
    requested_date: str
    reason: str
    status: str
    response_reason: str
    requester: UserContact
    target: UserContact
    schedule_swapped: bool = False

    @classmethod
    def from_swap(cls, swap, schedule_swapped: bool = False) -> "SwapNotice":
        return cls(
            id=str(swap.id),
            requested_date=swap.requested_date,
            reason=swap.reason or "",
            status=swap.status.value,
            response_reason=swap.response_reason or "",
            requester=UserContact.from_user(swap.requester),
            target=UserContact.from_user(swap.target_user),
            schedule_swapped=schedule_swapped,
        )


class ExternalNotifier(ABC):
    """Abstract out-of-band notification channel. Methods never raise."""

    @property
    @abstractmethod
    def is_ready(self) -> bool:
        pass

    @abstractmethod
    async def send_swap_request_notification(
        self, swap: SwapNotice, requester: UserContact, target: UserContact
    ) -> bool:
        pass

    @abstractmethod
    async def send_swap_response_notification(self, swap: SwapNotice, action: str) -> bool:
        pass

    @abstractmethod
    async def send_schedule_update_notification(
        self, user: UserContact, changes: List[Tuple[str, str]]
    ) -> bool:
        pass

    @abstractmethod
    async def send_test_notification(self, discord_id: str, message: str) -> bool:
        pass

    async def close(self) -> None:
        pass


class NullNotifier(ExternalNotifier):
    """No-op notifier for deployments without a chat bridge."""

    @property
    def is_ready(self) -> bool:
        return False

    async def send_swap_request_notification(self, swap, requester, target) -> bool:
        return False

    async def send_swap_response_notification(self, swap, action) -> bool:
        return False

    async def send_schedule_update_notification(self, user, changes) -> bool:
        return False

    async def send_test_notification(self, discord_id, message) -> bool:
        return False


class DiscordNotifier(ExternalNotifier):
    """Sends embeds to Discord users through the bot's REST API."""

    def __init__(
        self,
        token: str,
        channel_id: Optional[str] = None,
        frontend_url: str = "http://localhost:3000",
        api_base: str = "https://discord.com/api/v10",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.channel_id = channel_id
        self.frontend_url = frontend_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=api_base,
            headers={"Authorization": f"Bot {token}"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def is_ready(self) -> bool:
        return not self._client.is_closed

    async def close(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Message building
    # ------------------------------------------------------------------

    def _embed(self, title: str, description: str, color: int, fields: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        return {
            "title": title,
            "description": description,
            "color": color,
            "fields": fields or [],
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "footer": {"text": "Team Planner"},
        }

    def _open_app_row(self, label: str = "Open App") -> Dict[str, Any]:
        # Component type 1 = action row, 2 = button, style 5 = link
        return {
            "type": 1,
            "components": [
                {"type": 2, "style": 5, "label": label, "url": f"{self.frontend_url}/schedule"}
            ],
        }

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _post_message(self, channel_id: str, payload: Dict[str, Any]) -> None:
        response = await self._client.post(f"/channels/{channel_id}/messages", json=payload)
        response.raise_for_status()

    async def _send_direct(self, discord_id: str, payload: Dict[str, Any]) -> None:
        response = await self._client.post("/users/@me/channels", json={"recipient_id": discord_id})
        response.raise_for_status()
        await self._post_message(response.json()["id"], payload)

    async def _send_channel(self, payload: Dict[str, Any]) -> bool:
        if not self.channel_id:
            return False
        try:
            await self._post_message(self.channel_id, payload)
            return True
        except DELIVERY_ERRORS as e:
            logger.error(f"Error sending channel notification: {e}")
            return False

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    async def send_swap_request_notification(self, swap, requester, target) -> bool:
        payload = {
            "embeds": [self._embed(
                "New Shift Swap Request",
                f"**{requester.name}** wants to swap shifts with you!",
                COLOR_PENDING,
                [
                    {"name": "Date", "value": swap.requested_date, "inline": True},
                    {"name": "Reason", "value": swap.reason or "No reason provided", "inline": False},
                ],
            )],
            "components": [self._open_app_row()],
        }

        if target.discord_id:
            try:
                await self._send_direct(target.discord_id, payload)
                logger.info(f"Swap request DM sent to {target.name}")
                return True
            except DELIVERY_ERRORS as e:
                logger.warning(f"Failed to send DM to {target.name}, falling back to channel: {e}")
        return await self._send_channel(payload)

    async def send_swap_response_notification(self, swap, action) -> bool:
        requester = swap.requester
        if not requester.discord_id:
            return False

        approved = action == "approve"
        verb = "approved" if approved else "denied"
        fields = []
        if approved and swap.schedule_swapped:
            fields.append({"name": "Great News!", "value": "Your schedules have been automatically swapped."})
        elif approved:
            fields.append({"name": "Heads up", "value": "No schedule entries were changed for this date."})
        elif swap.response_reason:
            fields.append({"name": "Reason", "value": swap.response_reason})

        payload = {
            "embeds": [self._embed(
                f"Swap Request {verb.capitalize()}",
                f"Your swap request for **{swap.requested_date}** has been {verb} by {swap.target.name}.",
                COLOR_APPROVED if approved else COLOR_DENIED,
                fields,
            )],
        }
        try:
            await self._send_direct(requester.discord_id, payload)
        except DELIVERY_ERRORS as e:
            logger.error(f"Error sending swap response notification: {e}")
            return False
        logger.info(f"Swap response notification sent to {requester.name}")
        return True

    async def send_schedule_update_notification(self, user, changes) -> bool:
        if not user.discord_id:
            return False

        fields = [{"name": day, "value": label, "inline": True} for day, label in changes[:25]]
        payload = {
            "embeds": [self._embed(
                "Schedule Updated",
                "Your work schedule has been updated by an administrator.",
                COLOR_SCHEDULE,
                fields,
            )],
            "components": [self._open_app_row("View Schedule")],
        }
        try:
            await self._send_direct(user.discord_id, payload)
        except DELIVERY_ERRORS as e:
            logger.error(f"Error sending schedule update notification: {e}")
            return False
        logger.info(f"Schedule update notification sent to {user.name}")
        return True

    async def send_test_notification(self, discord_id, message) -> bool:
        payload = {"embeds": [self._embed("Test Notification", message, COLOR_INFO)]}
        try:
            await self._send_direct(discord_id, payload)
        except DELIVERY_ERRORS as e:
            logger.error(f"Error sending test notification: {e}")
            return False
        logger.info(f"Test notification sent to Discord ID: {discord_id}")
        return True


def build_notifier(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> ExternalNotifier:
    """Pick the notifier for this process. Falls back to a no-op on bad configuration."""
    if not settings.discord_bot_token:
        logger.info("Discord bot token not provided, Discord integration disabled")
        return NullNotifier()

    try:
        notifier = DiscordNotifier(
            token=settings.discord_bot_token,
            channel_id=settings.discord_channel_id,
            frontend_url=settings.frontend_url,
            api_base=settings.discord_api_base,
            timeout=settings.discord_timeout_seconds,
            transport=transport,
        )
    except (ValueError, httpx.InvalidURL) as e:
        logger.error(f"Failed to initialize Discord notifier, using no-op: {e}")
        return NullNotifier()

    logger.info("Discord notifier enabled")
    return notifier
