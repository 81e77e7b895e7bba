import json

import httpx
import pytest

from team_planner.config import Settings
from team_planner.services.notifier import (
    DiscordNotifier,
    NullNotifier,
    SwapNotice,
    UserContact,
    build_notifier,
)

ALICE = UserContact(id="1", name="Alice", email="alice@example.com", discord_id="111")
BOB = UserContact(id="2", name="Bob", email="bob@example.com", discord_id="222")
UNLINKED = UserContact(id="3", name="Carol", email="carol@example.com")


def notice(target=BOB, requester=ALICE, **overrides) -> SwapNotice:
    values = dict(
        id="swap-1",
        requested_date="2025-03-10",
        reason="dentist appointment",
        status="pending",
        response_reason="",
        requester=requester,
        target=target,
    )
    values.update(overrides)
    return SwapNotice(**values)


class FakeDiscord:
    """Minimal Discord REST API: opens DM channels and accepts messages."""

    def __init__(self, dm_status: int = 200, message_status: int = 200):
        self.dm_status = dm_status
        self.message_status = message_status
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, request.url.path, body))
        if request.url.path.endswith("/users/@me/channels"):
            if self.dm_status != 200:
                return httpx.Response(self.dm_status, json={"message": "Cannot send messages to this user"})
            return httpx.Response(200, json={"id": f"dm-{body['recipient_id']}"})
        return httpx.Response(self.message_status, json={"id": "message-1"})

    def paths(self):
        return [path for _, path, _ in self.requests]


@pytest.fixture
def discord_api():
    return FakeDiscord()


@pytest.fixture
async def notifier(discord_api):
    notifier = DiscordNotifier(
        token="bot-token",
        channel_id="555",
        frontend_url="https://planner.example.com/",
        transport=httpx.MockTransport(discord_api),
    )
    yield notifier
    await notifier.close()


async def test_swap_request_sent_as_direct_message(notifier, discord_api):
    assert await notifier.send_swap_request_notification(notice(), ALICE, BOB) is True

    assert discord_api.paths() == ["/api/v10/users/@me/channels", "/api/v10/channels/dm-222/messages"]
    _, _, payload = discord_api.requests[1]
    embed = payload["embeds"][0]
    assert embed["title"] == "New Shift Swap Request"
    assert "Alice" in embed["description"]
    assert {"name": "Date", "value": "2025-03-10", "inline": True} in embed["fields"]
    button = payload["components"][0]["components"][0]
    assert button["url"] == "https://planner.example.com/schedule"


async def test_swap_request_falls_back_to_channel(discord_api, notifier):
    discord_api.dm_status = 403

    assert await notifier.send_swap_request_notification(notice(), ALICE, BOB) is True
    assert discord_api.paths()[-1] == "/api/v10/channels/555/messages"


async def test_swap_request_for_unlinked_target_uses_channel(notifier, discord_api):
    assert await notifier.send_swap_request_notification(notice(target=UNLINKED), ALICE, UNLINKED) is True
    assert discord_api.paths() == ["/api/v10/channels/555/messages"]


async def test_swap_response_mentions_the_swap(notifier, discord_api):
    delivered = await notifier.send_swap_response_notification(
        notice(status="approved", schedule_swapped=True), "approve"
    )

    assert delivered is True
    _, path, payload = discord_api.requests[-1]
    assert path == "/api/v10/channels/dm-111/messages"
    embed = payload["embeds"][0]
    assert embed["title"] == "Swap Request Approved"
    assert embed["fields"][0]["name"] == "Great News!"


async def test_swap_response_denied_includes_reason(notifier, discord_api):
    await notifier.send_swap_response_notification(
        notice(status="denied", response_reason="Client visit"), "deny"
    )

    embed = discord_api.requests[-1][2]["embeds"][0]
    assert embed["title"] == "Swap Request Denied"
    assert embed["fields"] == [{"name": "Reason", "value": "Client visit"}]


async def test_swap_response_for_unlinked_requester_is_skipped(notifier, discord_api):
    assert await notifier.send_swap_response_notification(notice(requester=UNLINKED), "approve") is False
    assert discord_api.requests == []


async def test_delivery_errors_return_false(notifier, discord_api):
    discord_api.message_status = 500

    assert await notifier.send_test_notification("111", "hello") is False
    assert await notifier.send_schedule_update_notification(ALICE, [("2025-03-10", "office")]) is False


async def test_schedule_update_lists_changes(notifier, discord_api):
    assert await notifier.send_schedule_update_notification(ALICE, [("2025-03-10", "office")]) is True

    embed = discord_api.requests[-1][2]["embeds"][0]
    assert embed["fields"] == [{"name": "2025-03-10", "value": "office", "inline": True}]


async def test_null_notifier_never_delivers():
    null = NullNotifier()

    assert null.is_ready is False
    assert await null.send_swap_request_notification(notice(), ALICE, BOB) is False
    assert await null.send_test_notification("111", "hello") is False


async def test_build_notifier_without_token():
    assert isinstance(build_notifier(Settings(discord_bot_token=None)), NullNotifier)


async def test_build_notifier_with_token(discord_api):
    notifier = build_notifier(
        Settings(discord_bot_token="bot-token", discord_channel_id="555"),
        transport=httpx.MockTransport(discord_api),
    )
    try:
        assert isinstance(notifier, DiscordNotifier)
        assert notifier.is_ready
        assert await notifier.send_test_notification("111", "hello") is True
    finally:
        await notifier.close()
    assert not notifier.is_ready
