"""
NASA Explorer — Input Validators
=================================

What:  Validation for the three user inputs the app accepts: search term,
       APOD date, APOD count.
Who:   Shared by the proxy routes (server side) and the client controllers,
       so both reject the same inputs with the same messages.
How:   Each validator returns the normalized value or raises ValidationError.
"""

from datetime import date, datetime, timezone
from typing import Optional

from explorer.exceptions import ValidationError

# First APOD ever published
APOD_FIRST_DATE = date(1995, 6, 16)

# api.nasa.gov rejects count > 100
APOD_MAX_COUNT = 100

EMPTY_QUERY_MESSAGE = "Please enter a search term."


def validate_search_query(query: Optional[str]) -> str:
    """Return the trimmed query, or raise when nothing is left after trimming."""
    trimmed = (query or "").strip()
    if not trimmed:
        raise ValidationError(message=EMPTY_QUERY_MESSAGE, field="query")
    return trimmed


def validate_apod_date(value: Optional[str], today: Optional[date] = None) -> date:
    """
    Parse and range-check an APOD date.

    Accepts exactly YYYY-MM-DD between 1995-06-16 and today (UTC).
    """
    raw = (value or "").strip()
    if not raw:
        raise ValidationError(message="Please choose a date.", field="date")

    try:
        parsed = datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(
            message="Date must be in YYYY-MM-DD format.",
            field="date",
            context={"value": raw},
        )

    if today is None:
        today = datetime.now(timezone.utc).date()

    if parsed < APOD_FIRST_DATE:
        raise ValidationError(
            message=f"Date must be on or after {APOD_FIRST_DATE.isoformat()}.",
            field="date",
        )
    if parsed > today:
        raise ValidationError(message="Date cannot be in the future.", field="date")
    return parsed


def parse_apod_count(value: Optional[str]) -> Optional[int]:
    """Parse the `count` query parameter. None/empty means not supplied."""
    if value is None or value.strip() == "":
        return None

    try:
        count = int(value.strip())
    except ValueError:
        raise ValidationError(
            message="Invalid 'count' parameter: must be a number.",
            field="count",
            context={"value": value},
        )

    if not 1 <= count <= APOD_MAX_COUNT:
        raise ValidationError(
            message=f"Invalid 'count' parameter: must be between 1 and {APOD_MAX_COUNT}.",
            field="count",
            context={"value": count},
        )
    return count


def parse_page(value: Optional[str]) -> int:
    """Lenient page parsing: anything that is not a positive integer means page 1."""
    try:
        page = int((value or "").strip())
    except ValueError:
        return 1
    return page if page >= 1 else 1
