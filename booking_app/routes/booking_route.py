from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from booking_app.database import get_db
from booking_app.errors import AuthError, BookingAppError, InfrastructureError, OwnershipError, Reason
from booking_app.schemas.booking_schema import BookingCreate, BookingCreated, BookingResponse, MessageResponse
from booking_app.security.auth import AuthContext, get_token_subject, get_user_context, resolve_identity
from booking_app.services.booking_crud import booking_crud
from booking_app.logger import get_logger

booking_router = APIRouter()
logger = get_logger(__name__)

# USER ENDPOINTS - Users book and manage their own appointments


@booking_router.post("/book", response_model=BookingCreated, status_code=status.HTTP_200_OK)
def create_booking(
    booking: BookingCreate,
    token_subject: Optional[str] = Depends(get_token_subject),
    db: Session = Depends(get_db),
):
    """Book an appointment slot"""
    try:
        context = resolve_identity(token_subject, booking.user_id)
        logger.info(f"User {context.user_id} ({context.source}) booking {booking.date} {booking.time} for {booking.service}")
        db_booking = booking_crud.create_booking(db, booking, context.user_id)
        return BookingCreated(
            message="Appointment booked successfully",
            booking=BookingResponse.model_validate(db_booking),
        )

    except BookingAppError:
        raise
    except Exception as e:
        logger.error(f"Error creating booking: {str(e)}")
        raise InfrastructureError()


@booking_router.get("/my-bookings/{user_id}", response_model=List[BookingResponse], status_code=status.HTTP_200_OK)
def get_user_bookings(
    user_id: str,
    token_subject: Optional[str] = Depends(get_token_subject),
    db: Session = Depends(get_db),
):
    """List a user's bookings, earliest first"""
    try:
        context = resolve_identity(token_subject, user_id)
        if not context.authenticated:
            raise AuthError(Reason.unauthenticated)
        if context.user_id != user_id:
            raise OwnershipError()

        bookings = booking_crud.get_user_bookings(db, user_id)
        return [BookingResponse.model_validate(booking) for booking in bookings]

    except BookingAppError:
        raise
    except Exception as e:
        logger.error(f"Error fetching bookings of user {user_id}: {str(e)}")
        raise InfrastructureError()


@booking_router.delete("/booking/{booking_id}", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def cancel_booking(
    booking_id: str,
    context: AuthContext = Depends(get_user_context),
    db: Session = Depends(get_db),
):
    """Cancel one of your own bookings"""
    try:
        logger.info(f"User {context.user_id} ({context.source}) deleting booking: {booking_id}")
        booking_crud.cancel_by_owner(db, booking_id, context.user_id)
        return MessageResponse(message="Booking deleted")

    except BookingAppError:
        raise
    except Exception as e:
        logger.error(f"Error deleting booking {booking_id}: {str(e)}")
        raise InfrastructureError()
