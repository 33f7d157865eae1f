import math
from datetime import datetime, timedelta, timezone

from app.utils.exceptions import ValidationError


ONE_DAY = timedelta(days=1)


def utcnow() -> datetime:
    """Current time as a naive UTC datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_naive(value):
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def validate_stay(check_in: datetime, check_out: datetime):
    """Normalize a stay's dates to naive UTC and require check-out after check-in."""
    if check_in is None or check_out is None:
        raise ValidationError("Valid check-in and check-out dates are required")
    check_in, check_out = to_utc_naive(check_in), to_utc_naive(check_out)
    if check_out <= check_in:
        raise ValidationError("Check-out date must be after check-in date")
    return check_in, check_out


def validate_guests(adults, children):
    if adults is None or adults < 1:
        raise ValidationError("At least one adult guest is required")
    if children is None or children < 0:
        raise ValidationError("Children count must be a non-negative number")


def count_nights(check_in: datetime, check_out: datetime) -> int:
    """Nights between two instants; a started day counts as a full night."""
    return math.ceil((check_out - check_in) / ONE_DAY)
