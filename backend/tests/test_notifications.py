from datetime import datetime, timedelta
import uuid

import pytest

from team_planner.core.exceptions import NotFoundError
from team_planner.models.notification import (
    Notification,
    NotificationType,
    RelatedModel,
    ScheduleTarget,
    SwapRequestTarget,
)
from team_planner.services.notifications import NotificationService
from team_planner.services.swap_workflow import SwapWorkflowService


BASE_TIME = datetime(2025, 3, 1, 9, 0, 0)


def add_notification(db, user, notification_type=NotificationType.GENERAL, minutes=0, target=None, processed=False):
    notification = Notification(
        user_id=user.id,
        type=notification_type,
        title="Title",
        message=f"Message {minutes}",
        created_at=BASE_TIME + timedelta(minutes=minutes),
        processed_at=BASE_TIME if processed else None,
    )
    notification.target = target
    db.add(notification)
    db.commit()
    return notification


def test_target_round_trips_through_related_columns(db, alice):
    swap_id = uuid.uuid4()
    notification = add_notification(db, alice, NotificationType.SWAP_REQUEST, target=SwapRequestTarget(swap_id))

    assert notification.related_model == RelatedModel.SWAP_REQUEST
    assert notification.related_id == swap_id
    assert notification.target == SwapRequestTarget(swap_id)

    notification.target = None
    assert notification.related_id is None
    assert notification.related_model is None


def test_schedule_target_is_not_actionable(db, alice):
    notification = add_notification(
        db, alice, NotificationType.SCHEDULE_UPDATE, target=ScheduleTarget(uuid.uuid4())
    )
    assert notification.related_model == RelatedModel.SCHEDULE
    assert not notification.is_actionable


def test_list_active_hides_processed_swap_requests_only(db, alice):
    open_request = add_notification(db, alice, NotificationType.SWAP_REQUEST, 1, SwapRequestTarget(uuid.uuid4()))
    add_notification(db, alice, NotificationType.SWAP_REQUEST, 2, SwapRequestTarget(uuid.uuid4()), processed=True)
    response = add_notification(db, alice, NotificationType.SWAP_RESPONSE, 3, processed=True)
    general = add_notification(db, alice, NotificationType.GENERAL, 4)

    active = NotificationService(db).list_active(alice.id)

    assert [n.id for n in active] == [general.id, response.id, open_request.id]


def test_list_active_is_capped_and_newest_first(db, alice):
    for minutes in range(60):
        add_notification(db, alice, minutes=minutes)

    active = NotificationService(db).list_active(alice.id)

    assert len(active) == 50
    assert active[0].message == "Message 59"
    assert active[-1].message == "Message 10"
    created = [n.created_at for n in active]
    assert created == sorted(created, reverse=True)


def test_list_active_orders_requests_created_back_to_back(db, dispatcher, alice, bob):
    swaps = SwapWorkflowService(db, dispatcher)
    created = [
        swaps.create_swap_request(alice.id, str(bob.id), f"2025-03-1{day}")
        for day in range(5)
    ]

    active = NotificationService(db).list_active(bob.id)

    assert [n.related_id for n in active] == [swap.id for swap in reversed(created)]


def test_list_active_limit_cannot_exceed_cap(db, alice):
    for minutes in range(55):
        add_notification(db, alice, minutes=minutes)

    service = NotificationService(db)
    assert len(service.list_active(alice.id, limit=5)) == 5
    assert len(service.list_active(alice.id, limit=500)) == 50


def test_list_active_is_per_user(db, alice, bob):
    add_notification(db, alice)
    assert NotificationService(db).list_active(bob.id) == []


def test_mark_swap_request_processed(db, alice):
    swap_id = uuid.uuid4()
    request = add_notification(db, alice, NotificationType.SWAP_REQUEST, target=SwapRequestTarget(swap_id))
    other = add_notification(db, alice, NotificationType.SWAP_REQUEST, target=SwapRequestTarget(uuid.uuid4()))

    updated = NotificationService(db).mark_swap_request_processed(swap_id)
    db.commit()

    assert updated == 1
    assert request.processed_at is not None
    assert request.is_read is True
    assert request.read_at is not None
    assert other.processed_at is None


def test_mark_read(db, alice):
    notification = add_notification(db, alice)

    updated = NotificationService(db).mark_read(notification.id, alice.id)

    assert updated.is_read is True
    assert updated.read_at is not None


def test_mark_read_rejects_other_users_notification(db, alice, bob):
    notification = add_notification(db, alice)

    with pytest.raises(NotFoundError):
        NotificationService(db).mark_read(notification.id, bob.id)
