import re
from datetime import date
from typing import Union
from uuid import UUID

from team_planner.core.exceptions import InvalidInputError

DAY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")


def parse_id(value: Union[str, UUID], label: str = "id") -> UUID:
    """Parse a user/request identifier, rejecting anything that is not a UUID."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidInputError(f"Malformed {label}")


def require_day(value: str) -> str:
    """Validate a calendar day in YYYY-MM-DD form and return it unchanged."""
    if not isinstance(value, str) or not DAY_PATTERN.match(value):
        raise InvalidInputError("Date must be in YYYY-MM-DD format")
    try:
        date.fromisoformat(value)
    except ValueError:
        raise InvalidInputError(f"{value} is not a valid calendar date")
    return value


def month_bounds(year: int, month: int):
    """Inclusive first day and exclusive next-month first day, as ISO strings."""
    if not 1 <= month <= 12:
        raise InvalidInputError("Month must be between 1 and 12")
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start.isoformat(), end.isoformat()
