"""
Helpers shared by the request schemas and the request-validation handler.

Pydantic reports every problem it finds in a request body; clients of this API
get a single 400 message naming the first violated rule instead.
"""
import re
from datetime import datetime, timezone
from typing import Any, Sequence

from dateutil import parser as date_parser

from task_tracker.models.tasks import VALID_STATUSES

DEADLINE_MESSAGE = "Deadline must be a future date"
STATUS_MESSAGE = "status must be one of pending, in-progress, completed"

INVALID_DATE_MESSAGE = "deadline must be a valid date"


def sanitize_string(v):
    """Drop HTML tags and surrounding whitespace from free-text fields."""
    if not isinstance(v, str):
        return v
    v = re.sub(r"<[^>]*>", "", v)
    return v.strip()


def reject_blank(v, field: str = "subject"):
    """Blank text is refused; anything else is kept exactly as sent."""
    if isinstance(v, str) and not v.strip():
        raise ValueError(f"{field} must not be empty")
    return v


def parse_date(v):
    """
    Accept any string a date parser understands ("2999-01-15",
    "2999/01/15", "Jan 15, 2999", ...). Other inputs go on to pydantic.
    """
    if not isinstance(v, str):
        return v
    text = v.strip()
    if not text:
        raise ValueError(INVALID_DATE_MESSAGE)
    try:
        return date_parser.isoparse(text)
    except (ValueError, OverflowError):
        pass
    try:
        return date_parser.parse(text)
    except (ValueError, OverflowError):
        raise ValueError(INVALID_DATE_MESSAGE)


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    try:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    except OverflowError:
        # Offsets that push the value past datetime.max/min
        raise ValueError(INVALID_DATE_MESSAGE)


def is_future(value: datetime, now: datetime | None = None) -> bool:
    now = now or datetime.now(timezone.utc)
    return ensure_utc(value) > now


def require_future(value: datetime) -> datetime:
    if not is_future(value):
        raise ValueError(DEADLINE_MESSAGE)
    return ensure_utc(value)


def _field_name(loc: Sequence[Any]) -> str:
    for part in reversed(loc):
        if isinstance(part, str):
            return part
    return "body"


def describe_validation_error(errors: Sequence[dict]) -> dict:
    if not errors:
        return {"detail": "Invalid request"}

    err = errors[0]
    field = _field_name(err.get("loc", ()))
    kind = err.get("type", "")
    ctx = err.get("ctx") or {}

    if field == "status" and kind == "enum":
        return {"detail": STATUS_MESSAGE, "valid_statuses": VALID_STATUSES}
    if kind == "missing":
        return {"detail": f"{field} is a required field"}
    if kind == "value_error" and "error" in ctx:
        return {"detail": str(ctx["error"])}
    if kind == "string_too_short":
        min_length = ctx.get("min_length", 1)
        if min_length > 1:
            return {"detail": f"{field} must be at least {min_length} characters"}
        return {"detail": f"{field} must not be empty"}
    if kind.startswith("datetime") or kind.startswith("date"):
        return {"detail": f"{field} must be a valid date"}
    if kind == "list_type":
        return {"detail": f"{field} must be an array"}
    return {"detail": f"{field}: {err.get('msg', 'invalid value')}"}
