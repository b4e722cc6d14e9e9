from typing import List, Optional
from sqlalchemy.orm import Session
from booking_app.models.booking_model import Booking
from booking_app.schemas.booking_schema import BookedUser, BookingView
from booking_app.services.user_crud import user_crud
from booking_app.logger import get_logger

logger = get_logger(__name__)

PLACEHOLDER_USER = BookedUser(name="-", email="-")


class AdminBookingQuery:
    @staticmethod
    def _matches(view: BookingView, needle: str) -> bool:
        haystacks = (view.user.name, view.user.email, view.service)
        return any(needle in (value or "").lower() for value in haystacks)

    @staticmethod
    def query_bookings(
        db: Session,
        date_filter: Optional[str] = None,
        search_text: Optional[str] = None,
    ) -> List[BookingView]:
        """Bookings joined with their owners, earliest first.

        ``date_filter`` keeps only bookings on exactly that date.
        ``search_text`` is matched case-insensitively against the owner's
        name and email and the booked service; the match runs in memory
        once the owners have been resolved.
        """
        query = db.query(Booking)

        date_filter = (date_filter or "").strip()
        if date_filter:
            query = query.filter(Booking.date == date_filter)

        bookings = query.order_by(Booking.date.asc(), Booking.time.asc()).all()

        users = user_crud.get_users_by_ids(db, (booking.user_id for booking in bookings))

        views = []
        for booking in bookings:
            owner = users.get(booking.user_id)
            user = BookedUser(id=owner.id, name=owner.name, email=owner.email) if owner else PLACEHOLDER_USER
            views.append(
                BookingView(
                    id=booking.id,
                    user_id=booking.user_id,
                    date=booking.date,
                    time=booking.time,
                    service=booking.service,
                    status=booking.status,
                    note=booking.note or "",
                    user=user,
                )
            )

        needle = (search_text or "").strip().lower()
        if needle:
            views = [view for view in views if AdminBookingQuery._matches(view, needle)]

        logger.debug(f"Admin query date={date_filter!r} q={needle!r} -> {len(views)} bookings")
        return views


admin_booking_query = AdminBookingQuery()
