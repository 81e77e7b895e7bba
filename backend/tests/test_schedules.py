import uuid

import pytest

from team_planner.core.exceptions import InvalidInputError, NotFoundError
from team_planner.models.notification import Notification, NotificationType, RelatedModel
from team_planner.models.schedule_entry import DayOff, LocationType, ScheduleEntry
from team_planner.services.schedules import ScheduleService

from tests.conftest import make_entry


@pytest.fixture
def service(db, dispatcher) -> ScheduleService:
    return ScheduleService(db, dispatcher)


def test_set_schedule_inserts_entries_and_notifies(db, service, dispatcher, admin, alice):
    count = service.set_schedule(admin, alice.id, {
        "2025-03-10": (LocationType.OFFICE, None),
        "2025-03-11": (DayOff("Moving house"), None),
    })

    assert count == 2
    schedule = {entry.date: entry.to_calendar_value() for entry in service.get_user_schedule(alice.id)}
    assert schedule == {
        "2025-03-10": "office",
        "2025-03-11": {"type": "dayoff", "reason": "Moving house"},
    }

    notification = db.query(Notification).filter(Notification.user_id == alice.id).one()
    assert notification.type == NotificationType.SCHEDULE_UPDATE
    assert notification.related_model is None

    assert dispatcher.kinds() == ["schedule_update"]
    _, contact, changes = dispatcher.jobs[0]
    assert contact.email == "alice@example.com"
    assert changes == [("2025-03-10", "office"), ("2025-03-11", "dayoff (Moving house)")]


def test_set_schedule_overwrites_and_bumps_version(db, service, admin, alice):
    entry = make_entry(db, alice, "2025-03-10", LocationType.OFFICE, created_by=admin)

    service.set_schedule(admin, alice.id, {"2025-03-10": (LocationType.REMOTE, None)})

    db.refresh(entry)
    assert entry.location == LocationType.REMOTE
    assert entry.version == 2
    assert db.query(ScheduleEntry).count() == 1

    notification = db.query(Notification).filter(Notification.user_id == alice.id).one()
    assert notification.related_model == RelatedModel.SCHEDULE
    assert notification.related_id == entry.id


def test_set_schedule_rejects_bad_dates_before_writing(db, service, admin, alice):
    with pytest.raises(InvalidInputError):
        service.set_schedule(admin, alice.id, {
            "2025-03-10": (LocationType.OFFICE, None),
            "2025-13-01": (LocationType.OFFICE, None),
        })
    assert db.query(ScheduleEntry).count() == 0


def test_set_schedule_unknown_user(service, admin):
    with pytest.raises(NotFoundError):
        service.set_schedule(admin, uuid.uuid4(), {"2025-03-10": (LocationType.OFFICE, None)})


def test_get_user_schedule_month_filter(db, service, admin, alice):
    make_entry(db, alice, "2025-02-28", LocationType.OFFICE, created_by=admin)
    make_entry(db, alice, "2025-03-01", LocationType.REMOTE, created_by=admin)
    make_entry(db, alice, "2025-03-31", LocationType.SICK, created_by=admin)
    make_entry(db, alice, "2025-04-01", LocationType.OFFICE, created_by=admin)

    march = service.get_user_schedule(alice.id, "2025-03")

    assert [entry.date for entry in march] == ["2025-03-01", "2025-03-31"]
    with pytest.raises(InvalidInputError):
        service.get_user_schedule(alice.id, "March")


def test_team_schedules_mark_the_viewer(db, service, admin, alice, bob):
    make_entry(db, bob, "2025-03-10", LocationType.DAYOFF, created_by=admin)

    team = {member["name"]: member for member in service.get_team_schedules(alice.id)}

    assert team["Alice"]["can_swap_with"] is False
    assert team["Bob"]["can_swap_with"] is True
    assert team["Bob"]["schedule"] == {"2025-03-10": "dayoff"}


def test_clear_schedule_removes_one_month(db, service, admin, alice, bob):
    make_entry(db, alice, "2025-03-01", LocationType.OFFICE, created_by=admin)
    make_entry(db, alice, "2025-03-31", LocationType.OFFICE, created_by=admin)
    make_entry(db, alice, "2025-04-01", LocationType.OFFICE, created_by=admin)
    make_entry(db, bob, "2025-03-15", LocationType.OFFICE, created_by=admin)

    deleted = service.clear_schedule(admin, alice.id, 2025, 3)

    assert deleted == 2
    remaining = sorted((entry.user_id == alice.id, entry.date) for entry in db.query(ScheduleEntry).all())
    assert remaining == [(False, "2025-03-15"), (True, "2025-04-01")]


def test_clear_schedule_rejects_bad_month(service, admin, alice):
    with pytest.raises(InvalidInputError):
        service.clear_schedule(admin, alice.id, 2025, 13)
