from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from booking_app.config import settings
from booking_app.errors import NotFoundError, OwnershipError, Reason, ValidationError
from booking_app.models.booking_model import Booking
from booking_app.schemas.booking_schema import BookingCreate, BookingEdit, BookingStatus
from booking_app.services.booking_validator import (
    format_slot,
    parse_booking_date,
    parse_booking_time,
    validate_booking,
    validate_edit,
)
from booking_app.services.user_crud import user_crud
from booking_app.logger import get_logger

logger = get_logger(__name__)

REVIEW_STATUSES = {BookingStatus.accepted.value, BookingStatus.rejected.value}


class BookingCRUD:
    @staticmethod
    def _canonical_slot(day_value: Optional[str], time_value: Optional[str]) -> Optional[tuple]:
        day = parse_booking_date(day_value) if day_value else None
        start = parse_booking_time(time_value) if time_value else None
        if day is None or start is None:
            return None
        return format_slot(day, start)

    @staticmethod
    def _bookings_at_slot(db: Session, slot: Optional[tuple]) -> List[Booking]:
        if slot is None:
            return []
        day, start = slot
        return db.query(Booking).filter(Booking.date == day, Booking.time == start).all()

    @staticmethod
    def _commit(db: Session, action: str) -> None:
        """Commit, turning a slot unique-constraint violation into a conflict"""
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Slot already taken while trying to {action}: {str(e.orig)}")
            raise ValidationError(Reason.slot_conflict)
        except Exception as e:
            db.rollback()
            logger.error(f"Error while trying to {action}: {str(e)}")
            raise

    @staticmethod
    def get_booking_by_id(db: Session, booking_id: str) -> Optional[Booking]:
        return db.query(Booking).filter(Booking.id == str(booking_id)).first()

    @staticmethod
    def require_booking(db: Session, booking_id: str) -> Booking:
        booking = BookingCRUD.get_booking_by_id(db, booking_id)
        if not booking:
            raise NotFoundError()
        return booking

    @staticmethod
    def create_booking(db: Session, booking: BookingCreate, user_id: Optional[str]) -> Booking:
        """Validate and store a new pending booking"""
        slot = BookingCRUD._canonical_slot(booking.date, booking.time)

        user_exists = None
        if settings.REQUIRE_EXISTING_USER and user_id:
            user_exists = user_crud.get_user_by_id(db, user_id) is not None

        decision = validate_booking(
            booking.date,
            booking.time,
            booking.service,
            user_id,
            existing_at_slot=BookingCRUD._bookings_at_slot(db, slot),
            user_exists=user_exists,
        )
        if not decision.ok:
            logger.info(f"Booking rejected for user {user_id}: {decision.reason.value}")
            raise ValidationError(decision.reason)

        day, start = slot
        db_booking = Booking(
            user_id=str(user_id),
            date=day,
            time=start,
            service=booking.service,
            status=BookingStatus.pending.value,
            note="",
        )
        db.add(db_booking)
        BookingCRUD._commit(db, f"book {day} {start}")
        db.refresh(db_booking)
        logger.info(f"Booking created: {db_booking.id} by user {user_id} at {day} {start}")
        return db_booking

    @staticmethod
    def get_user_bookings(db: Session, user_id: str) -> List[Booking]:
        """All bookings of one user, earliest first"""
        return (
            db.query(Booking)
            .filter(Booking.user_id == str(user_id))
            .order_by(Booking.date.asc(), Booking.time.asc())
            .all()
        )

    @staticmethod
    def cancel_by_owner(db: Session, booking_id: str, requesting_user_id: Optional[str]) -> None:
        db_booking = BookingCRUD.require_booking(db, booking_id)

        if requesting_user_id is None or db_booking.user_id != str(requesting_user_id):
            logger.warning(f"User {requesting_user_id} may not delete booking {booking_id}")
            raise OwnershipError()

        db.delete(db_booking)
        BookingCRUD._commit(db, f"delete booking {booking_id}")
        logger.info(f"Booking deleted by owner: {booking_id}")

    @staticmethod
    def set_status(db: Session, booking_id: str, status: Optional[str], note: Optional[str]) -> Booking:
        """Accept or reject a booking. It can never be put back to pending."""
        if status not in REVIEW_STATUSES:
            raise ValidationError(Reason.invalid_status)

        db_booking = BookingCRUD.require_booking(db, booking_id)
        db_booking.status = status
        db_booking.note = note or ""
        BookingCRUD._commit(db, f"update status of booking {booking_id}")
        db.refresh(db_booking)
        logger.info(f"Booking status updated: {booking_id} -> {status}")
        return db_booking

    @staticmethod
    def edit_booking(
        db: Session,
        booking_id: str,
        booking_edit: BookingEdit,
        check_calendar: Optional[bool] = None,
    ) -> Booking:
        """Move a booking and/or change its service; status and note are kept"""
        if check_calendar is None:
            check_calendar = settings.REVALIDATE_ON_ADMIN_EDIT

        slot = BookingCRUD._canonical_slot(booking_edit.date, booking_edit.time)
        decision = validate_edit(
            booking_edit.date,
            booking_edit.time,
            booking_edit.service,
            existing_at_slot=BookingCRUD._bookings_at_slot(db, slot),
            exclude_booking_id=booking_id,
            check_calendar=check_calendar,
        )
        if not decision.ok:
            logger.info(f"Edit of booking {booking_id} rejected: {decision.reason.value}")
            raise ValidationError(decision.reason)

        db_booking = BookingCRUD.require_booking(db, booking_id)
        db_booking.date, db_booking.time = slot
        db_booking.service = booking_edit.service
        BookingCRUD._commit(db, f"edit booking {booking_id}")
        db.refresh(db_booking)
        logger.info(f"Booking edited: {booking_id} -> {db_booking.date} {db_booking.time}")
        return db_booking

    @staticmethod
    def set_note(db: Session, booking_id: str, note: Optional[str]) -> Booking:
        db_booking = BookingCRUD.require_booking(db, booking_id)
        db_booking.note = note or ""
        BookingCRUD._commit(db, f"save note on booking {booking_id}")
        db.refresh(db_booking)
        logger.info(f"Note saved on booking {booking_id}")
        return db_booking

    @staticmethod
    def delete_booking(db: Session, booking_id: str) -> bool:
        """Remove a booking if it exists. Deleting a missing booking is not an error."""
        deleted = db.query(Booking).filter(Booking.id == str(booking_id)).delete()
        BookingCRUD._commit(db, f"delete booking {booking_id}")
        if deleted:
            logger.info(f"Booking deleted by admin: {booking_id}")
        else:
            logger.info(f"Admin delete of missing booking {booking_id} ignored")
        return bool(deleted)


booking_crud = BookingCRUD()
