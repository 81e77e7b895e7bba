from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from team_planner.api.deps import get_current_user, get_swap_service
from team_planner.core.exceptions import ForbiddenError
from team_planner.models.swap_request import SwapRequest, SwapStatus
from team_planner.models.user import User
from team_planner.schemas.swap import (
    SwapRequestCancelledResponse,
    SwapRequestCreate,
    SwapRequestCreatedResponse,
    SwapRequestDetail,
    SwapRequestListResponse,
    SwapRequestResolvedResponse,
    SwapRequestRespond,
)
from team_planner.services.swap_workflow import SwapWorkflowService

router = APIRouter()


def _detail(swap: SwapRequest) -> SwapRequestDetail:
    return SwapRequestDetail.model_validate(swap)


@router.get("/swap-requests", response_model=SwapRequestListResponse)
async def list_swap_requests(
    status_filter: Optional[SwapStatus] = Query(None, alias="status", description="Filter by status"),
    skip: int = 0,
    limit: int = Query(100, le=100),
    service: SwapWorkflowService = Depends(get_swap_service),
    current_user: User = Depends(get_current_user)
):
    """Swap requests the caller sent or received, newest first."""
    swaps = service.list_swap_requests(current_user.id, status_filter, skip, limit)
    return {"data": [_detail(swap) for swap in swaps]}


@router.get("/swap-request/{request_id}", response_model=SwapRequestDetail)
async def get_swap_request(
    request_id: str,
    service: SwapWorkflowService = Depends(get_swap_service),
    current_user: User = Depends(get_current_user)
):
    """A single swap request; visible to its two participants and admins."""
    swap = service.get_swap_request(request_id)
    if current_user.id not in (swap.requester_id, swap.target_user_id) and not current_user.is_admin:
        raise ForbiddenError("Not a participant in this swap request")
    return _detail(swap)


@router.post("/swap-request", response_model=SwapRequestCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_swap_request(
    payload: SwapRequestCreate,
    service: SwapWorkflowService = Depends(get_swap_service),
    current_user: User = Depends(get_current_user)
):
    """
    Ask another user to swap locations on one date.

    - targetUserId: the user whose entry for the date would be exchanged
    - requestedDate: YYYY-MM-DD
    - reason: optional free text shown to the target
    """
    swap = service.create_swap_request(
        current_user.id, payload.target_user_id, payload.requested_date, payload.reason
    )
    return {
        "swap_request": {
            "id": swap.id,
            "target_user": swap.target_user.name,
            "requested_date": swap.requested_date,
            "reason": swap.reason,
            "status": swap.status,
        }
    }


@router.put("/swap-request/{request_id}/respond", response_model=SwapRequestResolvedResponse)
async def respond_to_swap_request(
    request_id: str,
    payload: SwapRequestRespond,
    service: SwapWorkflowService = Depends(get_swap_service),
    current_user: User = Depends(get_current_user)
):
    """Approve or deny a pending request addressed to the caller."""
    resolution = service.respond_to_swap_request(
        request_id, current_user.id, payload.action, payload.reason
    )
    swap = resolution.swap
    return {
        "message": f"Swap request {swap.status.value} successfully",
        "swap_request": {
            "id": swap.id,
            "status": swap.status,
            "requested_date": swap.requested_date,
            "requester": swap.requester.name,
            "target_user": swap.target_user.name,
            "responded_at": swap.responded_at,
            "response_reason": swap.response_reason,
            "schedule_swapped": resolution.schedule_swapped,
        },
    }


@router.put("/swap-request/{request_id}/cancel", response_model=SwapRequestCancelledResponse)
async def cancel_swap_request(
    request_id: str,
    service: SwapWorkflowService = Depends(get_swap_service),
    current_user: User = Depends(get_current_user)
):
    """Withdraw a pending request the caller sent."""
    swap = service.cancel_swap_request(request_id, current_user.id)
    return {"swap_request": _detail(swap)}
