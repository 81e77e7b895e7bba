"""
Domain errors raised by the service layer.

Each error carries the HTTP status the API surface answers with, so route
handlers never translate them by hand; main.py renders them into the
``{"success": false, "message": ...}`` envelope.
"""

from typing import Any, Dict, Optional


class PlannerError(Exception):
    """Base exception for team planner operations."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "message": self.message}


class InvalidInputError(PlannerError):
    """Missing or malformed field, bad id, bad date, self-swap."""
    status_code = 400


class NotFoundError(PlannerError):
    """Unknown user, swap request or notification."""
    status_code = 404


class ForbiddenError(PlannerError):
    """Caller is not allowed to act on this resource."""
    status_code = 403


class ConflictError(PlannerError):
    """Operation not allowed in the current state."""
    status_code = 409


class DuplicateSwapRequestError(ConflictError):
    """A pending request already exists for the same requester, target and date."""
    status_code = 400


class SwapAlreadyResolvedError(ConflictError):
    """The swap request has left the pending state."""

    def __init__(self, current_status: str, message: Optional[str] = None):
        super().__init__(message or f"Swap request has already been {current_status}")
        self.current_status = current_status

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["status"] = self.current_status
        return data


class ServiceUnavailableError(PlannerError):
    """An optional integration is not configured or not ready."""
    status_code = 503
