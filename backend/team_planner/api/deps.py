"""FastAPI dependencies for authentication and service wiring."""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from team_planner.core.database import get_db
from team_planner.core.security import decode_access_token
from team_planner.models.user import User
from team_planner.services.accounts import AccountService
from team_planner.services.dispatcher import NotificationDispatcher
from team_planner.services.notifications import NotificationService
from team_planner.services.schedules import ScheduleService
from team_planner.services.swap_workflow import SwapWorkflowService


bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    x_auth_token: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the caller from a Bearer token or the legacy x-auth-token header."""
    token = credentials.credentials if credentials else x_auth_token
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token, authorization denied",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = decode_access_token(token)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is not valid",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


def get_dispatcher(request: Request) -> Optional[NotificationDispatcher]:
    return getattr(request.app.state, "dispatcher", None)


def get_swap_service(
    db: Session = Depends(get_db),
    dispatcher: Optional[NotificationDispatcher] = Depends(get_dispatcher),
) -> SwapWorkflowService:
    return SwapWorkflowService(db, dispatcher)


def get_schedule_service(
    db: Session = Depends(get_db),
    dispatcher: Optional[NotificationDispatcher] = Depends(get_dispatcher),
) -> ScheduleService:
    return ScheduleService(db, dispatcher)


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db)


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    return AccountService(db)
