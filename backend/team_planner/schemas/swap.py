from typing import List, Optional
from datetime import datetime
from uuid import UUID

from pydantic import Field

from team_planner.models.swap_request import SwapStatus
from team_planner.schemas.base import CamelModel
from team_planner.schemas.user import UserSummary


class SwapRequestCreate(CamelModel):
    # Left optional so missing fields get the service's 400 message
    target_user_id: Optional[str] = None
    requested_date: Optional[str] = None
    reason: Optional[str] = ""


class SwapRequestRespond(CamelModel):
    action: Optional[str] = None
    reason: Optional[str] = None


class SwapRequestSummary(CamelModel):
    id: UUID
    target_user: str
    requested_date: str
    reason: str
    status: SwapStatus


class SwapRequestCreatedResponse(CamelModel):
    success: bool = True
    message: str = "Shift swap request sent successfully"
    swap_request: SwapRequestSummary


class SwapRequestResolution(CamelModel):
    id: UUID
    status: SwapStatus
    requested_date: str
    requester: str
    target_user: str
    responded_at: Optional[datetime] = None
    response_reason: str = ""
    schedule_swapped: bool = False


class SwapRequestResolvedResponse(CamelModel):
    success: bool = True
    message: str
    swap_request: SwapRequestResolution


class SwapRequestDetail(CamelModel):
    id: UUID
    requester: UserSummary
    target_user: UserSummary
    requested_date: str
    reason: str
    status: SwapStatus
    response_reason: str = ""
    created_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None


class SwapRequestListResponse(CamelModel):
    success: bool = True
    data: List[SwapRequestDetail] = Field(default_factory=list)


class SwapRequestCancelledResponse(CamelModel):
    success: bool = True
    message: str = "Swap request cancelled"
    swap_request: SwapRequestDetail
