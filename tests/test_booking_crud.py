from unittest.mock import patch

import pytest

from booking_app.config import settings
from booking_app.errors import NotFoundError, OwnershipError, Reason, ValidationError
from booking_app.models.booking_model import Booking
from booking_app.schemas.booking_schema import BookingCreate, BookingEdit
from booking_app.services.booking_crud import booking_crud

MONDAY = "2026-01-19"
TUESDAY = "2026-01-20"
SATURDAY = "2026-01-17"


def request(user_id, date=TUESDAY, time="10:00", service="haircut"):
    return BookingCreate(userId=user_id, date=date, time=time, service=service)


def test_create_booking_is_pending_with_empty_note(db, user):
    booking = booking_crud.create_booking(db, request(user.id, time="9:30"), user.id)

    assert booking.status == "pending"
    assert booking.note == ""
    assert booking.user_id == user.id
    # Stored in canonical form
    assert (booking.date, booking.time) == (TUESDAY, "09:30")


def test_second_booking_for_same_slot_conflicts(db, make_user):
    first = make_user("Alia Hassan")
    second = make_user("Bashir Noor")

    booking_crud.create_booking(db, request(first.id, service="haircut"), first.id)
    with pytest.raises(ValidationError) as exc:
        booking_crud.create_booking(db, request(second.id, service="massage"), second.id)
    assert exc.value.reason == Reason.slot_conflict


def test_conflict_regardless_of_order(db, make_user):
    first = make_user("Alia Hassan")
    second = make_user("Bashir Noor")

    booking_crud.create_booking(db, request(second.id, service="massage"), second.id)
    with pytest.raises(ValidationError) as exc:
        booking_crud.create_booking(db, request(first.id, service="haircut"), first.id)
    assert exc.value.reason == Reason.slot_conflict


def test_equivalent_time_spelling_still_conflicts(db, user, make_user):
    other = make_user("Bashir Noor")
    booking_crud.create_booking(db, request(user.id, time="09:00"), user.id)

    with pytest.raises(ValidationError) as exc:
        booking_crud.create_booking(db, request(other.id, time="9:00"), other.id)
    assert exc.value.reason == Reason.slot_conflict


def test_unique_constraint_reported_as_conflict(db, user, make_user):
    other = make_user("Bashir Noor")
    booking_crud.create_booking(db, request(user.id), user.id)

    # Simulate a racing request that passed the conflict check
    with patch("booking_app.services.booking_crud.BookingCRUD._bookings_at_slot", return_value=[]):
        with pytest.raises(ValidationError) as exc:
            booking_crud.create_booking(db, request(other.id), other.id)
    assert exc.value.reason == Reason.slot_conflict
    assert db.query(Booking).count() == 1


def test_unknown_user_rejected(db):
    with pytest.raises(ValidationError) as exc:
        booking_crud.create_booking(db, request("ghost"), "ghost")
    assert exc.value.reason == Reason.unknown_user


def test_unknown_user_allowed_when_policy_off(db):
    with patch.object(settings, "REQUIRE_EXISTING_USER", False):
        booking = booking_crud.create_booking(db, request("ghost"), "ghost")
    assert booking.user_id == "ghost"


def test_weekend_rejected(db, user):
    with pytest.raises(ValidationError) as exc:
        booking_crud.create_booking(db, request(user.id, date=SATURDAY), user.id)
    assert exc.value.reason == Reason.weekend_not_allowed


def test_user_bookings_ordered_by_date_and_time(db, user, make_user, make_booking):
    other = make_user("Bashir Noor")
    make_booking(user.id, date=TUESDAY, time="11:00")
    make_booking(user.id, date=MONDAY, time="15:00")
    make_booking(user.id, date=TUESDAY, time="09:00")
    make_booking(other.id, date=MONDAY, time="09:00")

    bookings = booking_crud.get_user_bookings(db, user.id)
    assert [(b.date, b.time) for b in bookings] == [(MONDAY, "15:00"), (TUESDAY, "09:00"), (TUESDAY, "11:00")]


def test_cancel_then_list(db, user, make_booking):
    booking = make_booking(user.id)
    booking_id = booking.id

    booking_crud.cancel_by_owner(db, booking_id, user.id)

    assert booking_id not in [b.id for b in booking_crud.get_user_bookings(db, user.id)]


def test_cancel_by_someone_else_forbidden(db, user, make_user, make_booking):
    intruder = make_user("Bashir Noor")
    booking = make_booking(user.id)

    with pytest.raises(OwnershipError):
        booking_crud.cancel_by_owner(db, booking.id, intruder.id)
    with pytest.raises(OwnershipError):
        booking_crud.cancel_by_owner(db, booking.id, None)
    assert booking_crud.get_booking_by_id(db, booking.id) is not None


def test_cancel_missing_booking(db, user):
    with pytest.raises(NotFoundError):
        booking_crud.cancel_by_owner(db, "missing", user.id)


def test_set_status_accepts_and_stores_note(db, user, make_booking):
    booking = make_booking(user.id)

    updated = booking_crud.set_status(db, booking.id, "accepted", "ok")
    assert (updated.status, updated.note) == ("accepted", "ok")

    updated = booking_crud.set_status(db, booking.id, "rejected", None)
    assert (updated.status, updated.note) == ("rejected", "")


def test_set_status_rejects_pending_and_unknown_values(db, user, make_booking):
    booking = make_booking(user.id)

    for status in ("pending", "ACCEPTED", None):
        with pytest.raises(ValidationError) as exc:
            booking_crud.set_status(db, booking.id, status, "x")
        assert exc.value.reason == Reason.invalid_status

    # Status is checked before the booking is looked up
    with pytest.raises(ValidationError):
        booking_crud.set_status(db, "missing", "pending", "")
    with pytest.raises(NotFoundError):
        booking_crud.set_status(db, "missing", "accepted", "")


def test_edit_moves_booking_and_keeps_review(db, user, make_booking):
    booking = make_booking(user.id, status="accepted", note="regular")

    edited = booking_crud.edit_booking(db, booking.id, BookingEdit(date=MONDAY, time="14:00", service="massage"))

    assert (edited.date, edited.time, edited.service) == (MONDAY, "14:00", "massage")
    assert (edited.status, edited.note) == ("accepted", "regular")


def test_edit_to_own_slot_is_not_a_conflict(db, user, make_booking):
    booking = make_booking(user.id, time="10:00")
    edited = booking_crud.edit_booking(db, booking.id, BookingEdit(date=TUESDAY, time="10:00", service="beard trim"))
    assert edited.service == "beard trim"


def test_edit_conflict_and_missing_fields(db, user, make_booking):
    booking = make_booking(user.id, time="10:00")
    make_booking(user.id, time="11:00")

    with pytest.raises(ValidationError) as exc:
        booking_crud.edit_booking(db, booking.id, BookingEdit(date=TUESDAY, time="11:00", service="cut"))
    assert exc.value.reason == Reason.slot_conflict

    with pytest.raises(ValidationError) as exc:
        booking_crud.edit_booking(db, booking.id, BookingEdit(date=TUESDAY, time="11:00"))
    assert exc.value.reason == Reason.missing_fields


def test_edit_conflict_reported_before_not_found(db, user, make_booking):
    make_booking(user.id, time="10:00")

    with pytest.raises(ValidationError):
        booking_crud.edit_booking(db, "missing", BookingEdit(date=TUESDAY, time="10:00", service="cut"))
    with pytest.raises(NotFoundError):
        booking_crud.edit_booking(db, "missing", BookingEdit(date=TUESDAY, time="12:00", service="cut"))


def test_edit_unique_constraint_reported_as_conflict(db, user, make_booking):
    booking = make_booking(user.id, time="10:00")
    make_booking(user.id, time="11:00")

    # The slot check is skipped, so only the database can refuse the move
    with patch("booking_app.services.booking_crud.BookingCRUD._bookings_at_slot", return_value=[]):
        with pytest.raises(ValidationError) as exc:
            booking_crud.edit_booking(db, booking.id, BookingEdit(date=TUESDAY, time="11:00", service="cut"))
    assert exc.value.reason == Reason.slot_conflict

    unchanged = db.query(Booking).filter(Booking.id == booking.id).one()
    assert unchanged.time == "10:00"


def test_edit_calendar_rules_follow_policy(db, user, make_booking):
    booking = make_booking(user.id)
    weekend_edit = BookingEdit(date=SATURDAY, time="19:00", service="cut")

    with patch.object(settings, "REVALIDATE_ON_ADMIN_EDIT", True):
        with pytest.raises(ValidationError) as exc:
            booking_crud.edit_booking(db, booking.id, weekend_edit)
        assert exc.value.reason == Reason.weekend_not_allowed

    edited = booking_crud.edit_booking(db, booking.id, weekend_edit)
    assert (edited.date, edited.time) == (SATURDAY, "19:00")


def test_set_note_leaves_status(db, user, make_booking):
    booking = make_booking(user.id, status="rejected", note="old")

    updated = booking_crud.set_note(db, booking.id, "call back")
    assert (updated.status, updated.note) == ("rejected", "call back")

    assert booking_crud.set_note(db, booking.id, None).note == ""
    with pytest.raises(NotFoundError):
        booking_crud.set_note(db, "missing", "x")


def test_admin_delete_is_idempotent(db, user, make_booking):
    booking = make_booking(user.id)
    booking_id = booking.id

    assert booking_crud.delete_booking(db, booking_id) is True
    assert booking_crud.delete_booking(db, booking_id) is False
    assert booking_crud.get_booking_by_id(db, booking_id) is None
