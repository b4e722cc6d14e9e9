from enum import Enum
from typing import Optional
from fastapi import status


class Reason(str, Enum):
    missing_fields = "missing_fields"
    invalid_format = "invalid_format"
    unknown_user = "unknown_user"
    weekend_not_allowed = "weekend_not_allowed"
    outside_working_hours = "outside_working_hours"
    slot_conflict = "slot_conflict"
    invalid_status = "invalid_status"
    email_exists = "email_exists"
    wrong_password = "wrong_password"
    not_found = "not_found"
    user_not_found = "user_not_found"
    forbidden = "forbidden"
    admin_only = "admin_only"
    unauthenticated = "unauthenticated"
    server_error = "server_error"


MESSAGES = {
    Reason.missing_fields: "Missing fields",
    Reason.invalid_format: "Invalid date or time format, use YYYY-MM-DD and HH:MM",
    Reason.unknown_user: "User not found",
    Reason.weekend_not_allowed: "No bookings on weekends",
    Reason.outside_working_hours: "Working hours 09:00-17:00",
    Reason.slot_conflict: "Time already booked",
    Reason.invalid_status: "Invalid status",
    Reason.email_exists: "Email already exists",
    Reason.wrong_password: "Wrong password",
    Reason.not_found: "Booking not found",
    Reason.user_not_found: "User not found",
    Reason.forbidden: "Not allowed",
    Reason.admin_only: "Admin access only",
    Reason.unauthenticated: "Not authenticated",
    Reason.server_error: "Server error",
}

# Used when soft failures are turned off
STATUS_CODES = {
    Reason.missing_fields: status.HTTP_400_BAD_REQUEST,
    Reason.invalid_format: status.HTTP_400_BAD_REQUEST,
    Reason.unknown_user: status.HTTP_404_NOT_FOUND,
    Reason.weekend_not_allowed: status.HTTP_400_BAD_REQUEST,
    Reason.outside_working_hours: status.HTTP_400_BAD_REQUEST,
    Reason.slot_conflict: status.HTTP_409_CONFLICT,
    Reason.invalid_status: status.HTTP_400_BAD_REQUEST,
    Reason.email_exists: status.HTTP_409_CONFLICT,
    Reason.wrong_password: status.HTTP_401_UNAUTHORIZED,
    Reason.not_found: status.HTTP_404_NOT_FOUND,
    Reason.user_not_found: status.HTTP_404_NOT_FOUND,
    Reason.forbidden: status.HTTP_403_FORBIDDEN,
    Reason.admin_only: status.HTTP_403_FORBIDDEN,
    Reason.unauthenticated: status.HTTP_401_UNAUTHORIZED,
    Reason.server_error: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class BookingAppError(Exception):
    """Base class for business outcomes reported back to the caller"""

    def __init__(self, reason: Reason, message: Optional[str] = None):
        self.reason = reason
        self.message = message or MESSAGES[reason]
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.reason]


class ValidationError(BookingAppError):
    pass


class NotFoundError(BookingAppError):
    def __init__(self, reason: Reason = Reason.not_found, message: Optional[str] = None):
        super().__init__(reason, message)


class OwnershipError(BookingAppError):
    def __init__(self, message: Optional[str] = None):
        super().__init__(Reason.forbidden, message)


class AuthError(BookingAppError):
    """Raised by the admin gate and token checks, always mapped to 401/403"""


class InfrastructureError(BookingAppError):
    """Unexpected failure, reported without internal detail"""

    def __init__(self):
        super().__init__(Reason.server_error)


def error_body(reason: Reason, message: Optional[str] = None) -> dict:
    return {"ok": False, "reason": reason.value, "message": message or MESSAGES[reason]}
