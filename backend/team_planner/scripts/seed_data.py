"""
Sample Data Seeder

Generates sample data for trying out the Team Planner API:
- An admin and a handful of team members
- One month of schedule entries per member (weekdays only)
- A pending swap request with its notification

Prints a development access token for every account.

Run with: python -m team_planner.scripts.seed_data
"""

import random
from datetime import date, timedelta
from typing import List

from sqlalchemy.orm import Session

from team_planner.core.database import SessionLocal, engine, Base
from team_planner.core.security import create_access_token
from team_planner.models.notification import NotificationType, SwapRequestTarget
from team_planner.models.schedule_entry import LocationType, ScheduleEntry
from team_planner.models.swap_request import SwapRequest, SwapStatus
from team_planner.models.user import User, UserRole
from team_planner.services.notifications import NotificationService


TEAM = [
    ("Alice Martin", "alice@team-planner.dev"),
    ("Bob Nguyen", "bob@team-planner.dev"),
    ("Carla Rivera", "carla@team-planner.dev"),
    ("Dan Walker", "dan@team-planner.dev"),
    ("Eve Scott", "eve@team-planner.dev"),
]

# Weighted towards office/remote; the rest are occasional
LOCATION_WEIGHTS = [
    (LocationType.OFFICE, 50),
    (LocationType.REMOTE, 40),
    (LocationType.VACATION, 4),
    (LocationType.SICK, 2),
    (LocationType.DAYOFF, 4),
]

DAYOFF_REASONS = ["Moving house", "Family event", "Doctor appointment", ""]


def create_admin_user(db: Session) -> User:
    """Create admin user."""
    print("Creating admin user...")
    admin = User(name="Team Admin", email="admin@team-planner.dev", role=UserRole.ADMIN)
    db.add(admin)
    db.commit()
    print("Created admin user: admin@team-planner.dev")
    return admin


def create_team(db: Session) -> List[User]:
    """Create team members."""
    print("Creating team members...")
    members = []
    for name, email in TEAM:
        user = User(name=name, email=email, role=UserRole.USER)
        db.add(user)
        members.append(user)
    db.commit()
    print(f"Created {len(members)} team members")
    return members


def create_schedules(db: Session, admin: User, members: List[User], start: date, days: int = 30) -> None:
    """Create a month of weekday schedule entries for each member."""
    print("Creating schedule entries...")
    kinds = [kind for kind, _ in LOCATION_WEIGHTS]
    weights = [weight for _, weight in LOCATION_WEIGHTS]
    count = 0
    for member in members:
        for offset in range(days):
            current_date = start + timedelta(days=offset)
            if current_date.weekday() >= 5:
                continue
            location = random.choices(kinds, weights=weights)[0]
            reason = random.choice(DAYOFF_REASONS) if location == LocationType.DAYOFF else None
            db.add(ScheduleEntry(
                user_id=member.id,
                date=current_date.isoformat(),
                location=location,
                reason=reason,
                created_by=admin.id,
            ))
            count += 1
    db.commit()
    print(f"Created {count} schedule entries")


def create_sample_swap(db: Session, members: List[User], start: date) -> None:
    """Create one pending swap request between the first two members."""
    print("Creating sample swap request...")
    requester, target = members[0], members[1]
    day = start
    while day.weekday() >= 5:
        day += timedelta(days=1)

    swap = SwapRequest(
        requester_id=requester.id,
        target_user_id=target.id,
        requested_date=day.isoformat(),
        reason="Dentist appointment",
        status=SwapStatus.PENDING,
    )
    db.add(swap)
    db.flush()
    NotificationService(db).create(
        target.id,
        NotificationType.SWAP_REQUEST,
        "Shift Swap Request",
        f"{requester.name} wants to swap shifts with you on {swap.requested_date}. Reason: {swap.reason}",
        target=SwapRequestTarget(swap.id),
    )
    db.commit()
    print(f"Created swap request {requester.name} -> {target.name} on {swap.requested_date}")


def seed_all(db: Session):
    """Run all seed functions."""
    print("\n" + "="*50)
    print("SEEDING TEAM PLANNER DATABASE")
    print("="*50 + "\n")

    # Create tables if they don't exist
    Base.metadata.create_all(bind=engine)

    start = date.today().replace(day=1)
    admin = create_admin_user(db)
    members = create_team(db)
    create_schedules(db, admin, members, start)
    create_sample_swap(db, members, start)

    print("\n" + "="*50)
    print("SEEDING COMPLETE")
    print("="*50)
    print("\nDevelopment tokens (Authorization: Bearer <token>):")
    for user in [admin] + members:
        print(f"  {user.email}: {create_access_token(user.id)}")
    print("\n")


def main():
    """Main entry point."""
    db = SessionLocal()
    try:
        seed_all(db)
    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
