"""
Booking rules that do not touch storage.

A proposed booking is checked against the rules below, in order, and the
first failing rule decides the outcome:

1. every field present
2. date is YYYY-MM-DD, time is H:MM or HH:MM
3. the owner exists (only when the caller looked it up)
4. the date is a weekday
5. the time is within working hours, 09:00 to 17:00 inclusive
6. no other booking holds the same (date, time) slot
"""
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Iterable, Optional

from booking_app.errors import Reason

OPENING_MINUTE = 9 * 60
CLOSING_MINUTE = 17 * 60
WEEKEND = {5, 6}

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


@dataclass(frozen=True)
class Decision:
    ok: bool
    reason: Optional[Reason] = None

    @classmethod
    def accept(cls) -> "Decision":
        return cls(ok=True)

    @classmethod
    def reject(cls, reason: Reason) -> "Decision":
        return cls(ok=False, reason=reason)


def parse_booking_date(value: str) -> Optional[date]:
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (ValueError, AttributeError):
        return None


def parse_booking_time(value: str) -> Optional[time]:
    match = _TIME_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


def format_slot(day: date, start: time) -> tuple:
    """Canonical (date, time) strings as stored"""
    return day.isoformat(), start.strftime("%H:%M")


def minutes_since_midnight(start: time) -> int:
    return start.hour * 60 + start.minute


def is_weekend(day: date) -> bool:
    return day.weekday() in WEEKEND


def within_working_hours(start: time) -> bool:
    return OPENING_MINUTE <= minutes_since_midnight(start) <= CLOSING_MINUTE


def _missing(*values) -> bool:
    return any(not value for value in values)


def _slot_taken(existing_at_slot: Iterable, exclude_booking_id: Optional[str]) -> bool:
    return any(str(booking.id) != str(exclude_booking_id) for booking in existing_at_slot)


def _check_slot(
    day_value: str,
    time_value: str,
    existing_at_slot: Iterable,
    exclude_booking_id: Optional[str],
    check_calendar: bool,
    user_exists: Optional[bool] = None,
) -> Decision:
    day = parse_booking_date(day_value)
    start = parse_booking_time(time_value)
    if day is None or start is None:
        return Decision.reject(Reason.invalid_format)

    if user_exists is False:
        return Decision.reject(Reason.unknown_user)

    if check_calendar:
        if is_weekend(day):
            return Decision.reject(Reason.weekend_not_allowed)
        if not within_working_hours(start):
            return Decision.reject(Reason.outside_working_hours)

    if _slot_taken(existing_at_slot, exclude_booking_id):
        return Decision.reject(Reason.slot_conflict)

    return Decision.accept()


def validate_booking(
    day_value: Optional[str],
    time_value: Optional[str],
    service: Optional[str],
    user_id: Optional[str],
    existing_at_slot: Iterable = (),
    user_exists: Optional[bool] = None,
    exclude_booking_id: Optional[str] = None,
) -> Decision:
    """Decide whether a new booking may be made.

    ``existing_at_slot`` holds the bookings already stored at the requested
    (date, time); anything with an ``id`` attribute works. Pass
    ``user_exists=None`` to skip the owner check.
    """
    if _missing(day_value, time_value, service, user_id):
        return Decision.reject(Reason.missing_fields)

    return _check_slot(
        day_value,
        time_value,
        existing_at_slot,
        exclude_booking_id,
        check_calendar=True,
        user_exists=user_exists,
    )


def validate_edit(
    day_value: Optional[str],
    time_value: Optional[str],
    service: Optional[str],
    existing_at_slot: Iterable = (),
    exclude_booking_id: Optional[str] = None,
    check_calendar: bool = False,
) -> Decision:
    """Decide whether an administrator may move a booking to a new slot.

    Weekend and working-hour rules apply only when ``check_calendar`` is set.
    """
    if _missing(day_value, time_value, service):
        return Decision.reject(Reason.missing_fields)

    return _check_slot(day_value, time_value, existing_at_slot, exclude_booking_id, check_calendar)
