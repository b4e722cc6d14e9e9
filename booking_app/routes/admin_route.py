from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from booking_app.database import get_db
from booking_app.errors import BookingAppError, InfrastructureError
from booking_app.models.user_model import User
from booking_app.schemas.booking_schema import (
    BookingEdit,
    BookingNoteUpdate,
    BookingStatusResponse,
    BookingStatusUpdate,
    BookingView,
    MessageResponse,
)
from booking_app.security.auth import get_current_admin_user
from booking_app.services.admin_query import admin_booking_query
from booking_app.services.booking_crud import booking_crud
from booking_app.logger import get_logger

admin_router = APIRouter(prefix="/admin")
logger = get_logger(__name__)

# ADMIN ENDPOINTS - every route sits behind the admin gate


@admin_router.get("/bookings", response_model=List[BookingView], status_code=status.HTTP_200_OK)
def get_all_bookings(
    q: Optional[str] = Query(None, description="Search user name, email or service"),
    date: Optional[str] = Query(None, description="Only bookings on this date (YYYY-MM-DD)"),
    current_user: User = Depends(get_current_admin_user),
    db: Session = Depends(get_db),
):
    """All bookings with their owners (admin only)"""
    try:
        logger.info(f"Admin {current_user.email} fetching bookings (date={date}, q={q})")
        return admin_booking_query.query_bookings(db, date_filter=date, search_text=q)

    except BookingAppError:
        raise
    except Exception as e:
        logger.error(f"Error fetching all bookings: {str(e)}")
        raise InfrastructureError()


@admin_router.put("/booking/{booking_id}/status", response_model=BookingStatusResponse, status_code=status.HTTP_200_OK)
def update_booking_status(
    booking_id: str,
    status_update: BookingStatusUpdate,
    current_user: User = Depends(get_current_admin_user),
    db: Session = Depends(get_db),
):
    """Accept or reject a booking, with an optional note (admin only)"""
    try:
        logger.info(f"Admin {current_user.email} setting booking {booking_id} to {status_update.status}")
        db_booking = booking_crud.set_status(db, booking_id, status_update.status, status_update.note)
        return BookingStatusResponse(message="Booking updated", status=db_booking.status, note=db_booking.note)

    except BookingAppError:
        raise
    except Exception as e:
        logger.error(f"Error updating booking status {booking_id}: {str(e)}")
        raise InfrastructureError()


@admin_router.put("/booking/{booking_id}", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def edit_booking(
    booking_id: str,
    booking_edit: BookingEdit,
    current_user: User = Depends(get_current_admin_user),
    db: Session = Depends(get_db),
):
    """Move a booking or change its service (admin only)"""
    try:
        logger.info(f"Admin {current_user.email} editing booking {booking_id}")
        booking_crud.edit_booking(db, booking_id, booking_edit)
        return MessageResponse(message="Booking edited successfully")

    except BookingAppError:
        raise
    except Exception as e:
        logger.error(f"Error editing booking {booking_id}: {str(e)}")
        raise InfrastructureError()


@admin_router.patch("/booking/{booking_id}/note", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def update_booking_note(
    booking_id: str,
    note_update: BookingNoteUpdate,
    current_user: User = Depends(get_current_admin_user),
    db: Session = Depends(get_db),
):
    """Save the admin note on a booking (admin only)"""
    try:
        booking_crud.set_note(db, booking_id, note_update.note)
        return MessageResponse(message="Note saved")

    except BookingAppError:
        raise
    except Exception as e:
        logger.error(f"Error saving note on booking {booking_id}: {str(e)}")
        raise InfrastructureError()


@admin_router.delete("/booking/{booking_id}", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def delete_booking(
    booking_id: str,
    current_user: User = Depends(get_current_admin_user),
    db: Session = Depends(get_db),
):
    """Delete any booking; deleting a missing one still succeeds (admin only)"""
    try:
        logger.info(f"Admin {current_user.email} deleting booking {booking_id}")
        booking_crud.delete_booking(db, booking_id)
        return MessageResponse(message="Booking deleted (admin)")

    except BookingAppError:
        raise
    except Exception as e:
        logger.error(f"Error deleting booking {booking_id}: {str(e)}")
        raise InfrastructureError()
