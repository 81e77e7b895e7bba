"""User lookups and Discord account linking."""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from team_planner.core.exceptions import InvalidInputError
from team_planner.models.user import User

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()

    def find_by_discord_id(self, discord_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.discord_id == discord_id).first()

    def link_discord(self, user: User, discord_id: Optional[str], discord_username: Optional[str] = None) -> User:
        """Attach a Discord account; one Discord account maps to one user."""
        discord_id = (discord_id or "").strip()
        if not discord_id:
            raise InvalidInputError("Discord ID is required")

        owner = self.find_by_discord_id(discord_id)
        if owner and owner.id != user.id:
            raise InvalidInputError("This Discord ID is already linked to another account")

        user.discord_id = discord_id
        if discord_username:
            user.discord_username = discord_username
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Discord account linked for {user.email}")
        return user

    def unlink_discord(self, user: User) -> User:
        user.discord_id = None
        user.discord_username = None
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Discord account unlinked for {user.email}")
        return user
