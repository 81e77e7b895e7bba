"""
Swap Workflow Service

Lifecycle of a shift-swap request between two users for one date:

    pending --approve--> approved   (schedule entries exchanged)
    pending --deny-----> denied
    pending --cancel---> cancelled  (requester withdraws)

Every resolution commits the status change, the schedule exchange and the
notification bookkeeping in one transaction. ``swap_requests`` and
``schedule_entries`` are version-checked, so a concurrent resolution or admin
edit rolls the whole attempt back and it is retried from a fresh read; a
retried approval of an already-approved request fails with a conflict
instead of swapping twice.

External (chat) notifications are enqueued after the commit and never
affect the outcome.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, TypeVar, Union
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.orm.exc import StaleDataError

from team_planner.config import get_settings
from team_planner.core.exceptions import (
    ConflictError,
    DuplicateSwapRequestError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    SwapAlreadyResolvedError,
)
from team_planner.core.validation import parse_id, require_day
from team_planner.models.notification import NotificationType, SwapRequestTarget
from team_planner.models.swap_request import SwapRequest, SwapStatus
from team_planner.models.user import User
from team_planner.services.dispatcher import NotificationDispatcher
from team_planner.services.notifications import NotificationService
from team_planner.services.notifier import SwapNotice, UserContact
from team_planner.services.schedule_exchange import ScheduleExchange

logger = logging.getLogger(__name__)
settings = get_settings()

T = TypeVar("T")

ACTIONS = {"approve": SwapStatus.APPROVED, "deny": SwapStatus.DENIED}


@dataclass
class SwapResolution:
    """Outcome of responding to a swap request."""
    swap: SwapRequest
    action: str
    schedule_swapped: bool


def _same_id(left, right) -> bool:
    return str(left).strip().lower() == str(right).strip().lower()


class SwapWorkflowService:
    """Creates, resolves and cancels swap requests."""

    def __init__(
        self,
        db: Session,
        dispatcher: Optional[NotificationDispatcher] = None,
        max_attempts: Optional[int] = None,
    ):
        self.db = db
        self.dispatcher = dispatcher
        self.max_attempts = max_attempts or settings.swap_exchange_max_attempts
        self.notifications = NotificationService(db)
        self.exchange = ScheduleExchange(db)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_swap_request(
        self,
        requester_id: Union[str, UUID],
        target_user_id: Optional[Union[str, UUID]],
        requested_date: Optional[str],
        reason: Optional[str] = "",
    ) -> SwapRequest:
        """Validate and store a pending request, notify the target."""
        if not target_user_id or not requested_date:
            raise InvalidInputError("Target user and requested date are required")
        if _same_id(requester_id, target_user_id):
            raise InvalidInputError("Cannot swap with yourself")

        requester_uuid = parse_id(requester_id, "requester id")
        target_uuid = parse_id(target_user_id, "target user id")
        if requester_uuid == target_uuid:
            raise InvalidInputError("Cannot swap with yourself")

        require_day(requested_date)

        existing = self.db.query(SwapRequest).filter(
            SwapRequest.requester_id == requester_uuid,
            SwapRequest.target_user_id == target_uuid,
            SwapRequest.requested_date == requested_date,
            SwapRequest.status == SwapStatus.PENDING,
        ).first()
        if existing:
            raise DuplicateSwapRequestError(
                "A pending swap request already exists for this user and date"
            )

        requester = self.db.get(User, requester_uuid)
        if not requester:
            raise NotFoundError("Requester not found")
        target = self.db.get(User, target_uuid)
        if not target:
            raise NotFoundError("Target user not found")

        swap = SwapRequest(
            id=uuid.uuid4(),
            requester_id=requester.id,
            target_user_id=target.id,
            requested_date=requested_date,
            reason=(reason or "").strip(),
            status=SwapStatus.PENDING,
        )
        self.db.add(swap)

        message = f"{requester.name} wants to swap shifts with you on {requested_date}."
        if swap.reason:
            message += f" Reason: {swap.reason}"
        self.notifications.create(
            target.id,
            NotificationType.SWAP_REQUEST,
            "Shift Swap Request",
            message,
            target=SwapRequestTarget(swap.id),
        )

        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against an identical request
            self.db.rollback()
            raise DuplicateSwapRequestError(
                "A pending swap request already exists for this user and date"
            )
        self.db.refresh(swap)
        logger.info(f"Swap request {swap.id} created: {requester.email} -> {target.email} on {requested_date}")

        if self.dispatcher:
            self.dispatcher.enqueue_swap_request(
                SwapNotice.from_swap(swap),
                UserContact.from_user(requester),
                UserContact.from_user(target),
            )
        return swap

    # ------------------------------------------------------------------
    # Respond
    # ------------------------------------------------------------------

    def respond_to_swap_request(
        self,
        request_id: Union[str, UUID],
        responder_id: Union[str, UUID],
        action: Optional[str],
        reason: Optional[str] = None,
    ) -> SwapResolution:
        """Approve or deny a pending request addressed to the responder."""
        if action not in ACTIONS:
            raise InvalidInputError("Action must be either 'approve' or 'deny'")
        request_uuid = parse_id(request_id, "swap request id")
        responder_uuid = parse_id(responder_id, "user id")

        resolution = self._with_retry(
            f"respond to swap request {request_uuid}",
            lambda: self._resolve(request_uuid, responder_uuid, action, reason or ""),
        )
        logger.info(
            f"Swap request {resolution.swap.id} {resolution.swap.status.value} "
            f"(schedule swapped: {resolution.schedule_swapped})"
        )

        if self.dispatcher:
            self.dispatcher.enqueue_swap_response(
                SwapNotice.from_swap(resolution.swap, resolution.schedule_swapped),
                action,
            )
        return resolution

    def _resolve(self, request_id: UUID, responder_id: UUID, action: str, reason: str) -> SwapResolution:
        swap = self._lock_pending(request_id)
        if swap.target_user_id != responder_id:
            self.db.rollback()
            raise ForbiddenError("Only the addressed user may respond to this swap request")

        now = datetime.now(timezone.utc)
        schedule_swapped = False
        if action == "approve":
            schedule_swapped = self.exchange.exchange(
                swap.requester_id, swap.target_user_id, swap.requested_date
            )

        swap.status = ACTIONS[action]
        swap.responded_at = now
        swap.response_reason = reason.strip()

        target_name = swap.target_user.name
        if action == "approve":
            title = "Shift Swap Approved"
            message = f"{target_name} approved your swap request for {swap.requested_date}."
            if schedule_swapped:
                message += " Your schedules have been swapped."
            else:
                message += " No schedule entries were changed because one of you has no entry for that day."
        else:
            title = "Shift Swap Denied"
            message = f"{target_name} denied your swap request for {swap.requested_date}."
            if swap.response_reason:
                message += f" Reason: {swap.response_reason}"

        self.notifications.create(
            swap.requester_id,
            NotificationType.SWAP_RESPONSE,
            title,
            message,
            target=SwapRequestTarget(swap.id),
        )
        self.notifications.mark_swap_request_processed(swap.id, now)

        self.db.commit()
        self.db.refresh(swap)
        return SwapResolution(swap=swap, action=action, schedule_swapped=schedule_swapped)

    # ------------------------------------------------------------------
    # Cancel
    # ------------------------------------------------------------------

    def cancel_swap_request(self, request_id: Union[str, UUID], requester_id: Union[str, UUID]) -> SwapRequest:
        """Withdraw a pending request. Only its requester may do this."""
        request_uuid = parse_id(request_id, "swap request id")
        requester_uuid = parse_id(requester_id, "user id")

        swap = self._with_retry(
            f"cancel swap request {request_uuid}",
            lambda: self._cancel(request_uuid, requester_uuid),
        )
        logger.info(f"Swap request {swap.id} cancelled by requester")
        return swap

    def _cancel(self, request_id: UUID, requester_id: UUID) -> SwapRequest:
        swap = self._lock_pending(request_id)
        if swap.requester_id != requester_id:
            self.db.rollback()
            raise ForbiddenError("Only the requester can cancel this swap request")

        now = datetime.now(timezone.utc)
        swap.status = SwapStatus.CANCELLED
        swap.responded_at = now

        self.notifications.create(
            swap.target_user_id,
            NotificationType.SWAP_RESPONSE,
            "Shift Swap Cancelled",
            f"{swap.requester.name} withdrew the swap request for {swap.requested_date}.",
            target=SwapRequestTarget(swap.id),
        )
        self.notifications.mark_swap_request_processed(swap.id, now)

        self.db.commit()
        self.db.refresh(swap)
        return swap

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_swap_request(self, request_id: Union[str, UUID]) -> SwapRequest:
        swap = self.db.query(SwapRequest).options(
            joinedload(SwapRequest.requester),
            joinedload(SwapRequest.target_user),
        ).filter(SwapRequest.id == parse_id(request_id, "swap request id")).first()
        if not swap:
            raise NotFoundError("Swap request not found")
        return swap

    def list_swap_requests(
        self,
        user_id: UUID,
        status: Optional[SwapStatus] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[SwapRequest]:
        """Requests the user sent or received, newest first."""
        query = self.db.query(SwapRequest).options(
            joinedload(SwapRequest.requester),
            joinedload(SwapRequest.target_user),
        ).filter(
            or_(SwapRequest.requester_id == user_id, SwapRequest.target_user_id == user_id)
        )
        if status:
            query = query.filter(SwapRequest.status == status)
        return query.order_by(SwapRequest.created_at.desc()).offset(skip).limit(limit).all()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock_pending(self, request_id: UUID) -> SwapRequest:
        swap = self.db.query(SwapRequest).filter(
            SwapRequest.id == request_id
        ).with_for_update().first()
        if not swap:
            self.db.rollback()
            raise NotFoundError("Swap request not found")
        if swap.status != SwapStatus.PENDING:
            current = swap.status.value
            self.db.rollback()
            raise SwapAlreadyResolvedError(current)
        return swap

    def _with_retry(self, label: str, attempt: Callable[[], T]) -> T:
        for number in range(1, self.max_attempts + 1):
            try:
                return attempt()
            except StaleDataError:
                self.db.rollback()
                logger.warning(f"Concurrent modification during {label} (attempt {number}/{self.max_attempts})")
        raise ConflictError("Schedule changed while the swap was being applied, please try again")
