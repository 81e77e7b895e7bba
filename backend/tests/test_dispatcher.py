import asyncio
import logging

from team_planner.services.dispatcher import NotificationDispatcher
from team_planner.services.notifier import NullNotifier, SwapNotice, UserContact

ALICE = UserContact(id="1", name="Alice", email="alice@example.com", discord_id="111")
BOB = UserContact(id="2", name="Bob", email="bob@example.com", discord_id="222")
NOTICE = SwapNotice(
    id="swap-1",
    requested_date="2025-03-10",
    reason="dentist appointment",
    status="pending",
    response_reason="",
    requester=ALICE,
    target=BOB,
)


class RecordingNotifier(NullNotifier):
    def __init__(self, fail_first: bool = False):
        self.calls = []
        self.fail_first = fail_first
        self.closed = False

    @property
    def is_ready(self) -> bool:
        return True

    async def send_swap_request_notification(self, swap, requester, target) -> bool:
        self.calls.append(("swap_request", swap.id, target.name))
        if self.fail_first and len(self.calls) == 1:
            raise RuntimeError("gateway unavailable")
        return True

    async def send_swap_response_notification(self, swap, action) -> bool:
        self.calls.append(("swap_response", swap.id, action))
        return False

    async def send_schedule_update_notification(self, user, changes) -> bool:
        self.calls.append(("schedule_update", user.name, len(changes)))
        return True

    async def close(self) -> None:
        self.closed = True


async def test_delivers_jobs_in_order():
    notifier = RecordingNotifier()
    dispatcher = NotificationDispatcher(notifier)
    await dispatcher.start()

    assert dispatcher.enqueue_swap_request(NOTICE, ALICE, BOB)
    assert dispatcher.enqueue_swap_response(NOTICE, "approve")
    assert dispatcher.enqueue_schedule_update(ALICE, [("2025-03-10", "office")])
    await dispatcher.join()
    await dispatcher.stop()

    assert notifier.calls == [
        ("swap_request", "swap-1", "Bob"),
        ("swap_response", "swap-1", "approve"),
        ("schedule_update", "Alice", 1),
    ]
    assert notifier.closed
    assert not dispatcher.is_running


async def test_failures_are_logged_and_do_not_stop_the_consumer(caplog):
    notifier = RecordingNotifier(fail_first=True)
    dispatcher = NotificationDispatcher(notifier)
    await dispatcher.start()

    with caplog.at_level(logging.INFO, logger="team_planner.services.dispatcher"):
        dispatcher.enqueue_swap_request(NOTICE, ALICE, BOB)
        dispatcher.enqueue_swap_request(NOTICE, ALICE, BOB)
        dispatcher.enqueue_swap_response(NOTICE, "deny")
        await dispatcher.join()

    await dispatcher.stop()

    assert len(notifier.calls) == 3
    messages = [record.getMessage() for record in caplog.records]
    assert "External notification swap_request:swap-1 failed" in messages
    assert "External notification swap_request:swap-1 delivered" in messages
    assert "External notification swap_response:swap-1 not delivered" in messages


async def test_enqueue_does_not_wait_for_delivery():
    release = asyncio.Event()

    class SlowNotifier(RecordingNotifier):
        async def send_swap_request_notification(self, swap, requester, target) -> bool:
            await release.wait()
            return await super().send_swap_request_notification(swap, requester, target)

    notifier = SlowNotifier()
    dispatcher = NotificationDispatcher(notifier)
    await dispatcher.start()

    assert dispatcher.enqueue_swap_request(NOTICE, ALICE, BOB)
    await asyncio.sleep(0)
    assert notifier.calls == []

    release.set()
    await dispatcher.join()
    await dispatcher.stop()
    assert notifier.calls == [("swap_request", "swap-1", "Bob")]


async def test_full_queue_drops_job():
    dispatcher = NotificationDispatcher(RecordingNotifier(), maxsize=1)

    assert dispatcher.enqueue_swap_response(NOTICE, "approve") is True
    assert dispatcher.enqueue_swap_response(NOTICE, "approve") is False


async def test_stop_drains_pending_jobs():
    notifier = RecordingNotifier()
    dispatcher = NotificationDispatcher(notifier)
    dispatcher.enqueue_schedule_update(ALICE, [])
    await dispatcher.start()

    await dispatcher.stop()

    assert notifier.calls == [("schedule_update", "Alice", 0)]
