from fastapi import APIRouter, Depends

from team_planner.api.deps import get_account_service, get_current_user, get_dispatcher
from team_planner.core.exceptions import InvalidInputError, PlannerError, ServiceUnavailableError
from team_planner.models.user import User
from team_planner.schemas.base import MessageResponse
from team_planner.schemas.discord import DiscordLinkRequest, DiscordTestMessage
from team_planner.schemas.user import UserResponse
from team_planner.services.accounts import AccountService
from team_planner.services.dispatcher import NotificationDispatcher

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_linked_account(current_user: User = Depends(get_current_user)):
    """The caller's profile including the linked Discord account, if any."""
    return current_user


@router.post("/link", response_model=MessageResponse)
async def link_discord(
    payload: DiscordLinkRequest,
    accounts: AccountService = Depends(get_account_service),
    current_user: User = Depends(get_current_user)
):
    """Link a Discord account so notifications arrive as direct messages."""
    accounts.link_discord(current_user, payload.discord_id, payload.discord_username)
    return {"message": "Discord account linked successfully"}


@router.delete("/unlink", response_model=MessageResponse)
async def unlink_discord(
    accounts: AccountService = Depends(get_account_service),
    current_user: User = Depends(get_current_user)
):
    accounts.unlink_discord(current_user)
    return {"message": "Discord account unlinked successfully"}


@router.post("/test-notification", response_model=MessageResponse)
async def send_test_notification(
    payload: DiscordTestMessage,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    current_user: User = Depends(get_current_user)
):
    """
    Send a direct message to the caller's linked Discord account.

    Delivered inline rather than queued so the caller sees the outcome.
    """
    message = (payload.message or "").strip()
    if not message:
        raise InvalidInputError("Message is required")
    if not current_user.discord_id:
        raise InvalidInputError("Discord account not linked")
    if dispatcher is None or not dispatcher.notifier.is_ready:
        raise ServiceUnavailableError("Discord service is not available")

    delivered = await dispatcher.notifier.send_test_notification(current_user.discord_id, message)
    if not delivered:
        raise PlannerError("Failed to send test notification")
    return {"message": "Test notification sent successfully"}
