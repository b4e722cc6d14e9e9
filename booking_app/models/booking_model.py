from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, UniqueConstraint
import uuid
from booking_app.database import Base


class Booking(Base):
    __tablename__ = "bookings"
    # One booking per (date, time) slot
    __table_args__ = (UniqueConstraint("date", "time", name="uq_bookings_slot"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    # Weak reference, not a foreign key
    user_id = Column(String(36), nullable=False, index=True)
    date = Column(String(10), nullable=False, index=True)
    time = Column(String(5), nullable=False)
    service = Column(String, nullable=False)
    status = Column(String, nullable=False, default="pending")
    note = Column(String, nullable=False, default="")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
