from pydantic import AliasChoices, BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class BookingStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


# Every request field is optional; absent values are reported as missing_fields.

class BookingCreate(BaseModel):
    user_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("userId", "user_id"), description="Owner of the booking"
    )
    date: Optional[str] = Field(None, description="Calendar date, YYYY-MM-DD", examples=["2026-01-20"])
    time: Optional[str] = Field(None, description="Start time, HH:MM (24h)", examples=["10:30"])
    service: Optional[str] = Field(None, description="Requested service", examples=["haircut"])


class BookingEdit(BaseModel):
    date: Optional[str] = None
    time: Optional[str] = None
    service: Optional[str] = None


class BookingStatusUpdate(BaseModel):
    status: Optional[str] = Field(None, description="accepted | rejected")
    note: Optional[str] = None


class BookingNoteUpdate(BaseModel):
    note: Optional[str] = None


class BookingResponse(BaseModel):
    id: str
    user_id: str = Field(..., alias="userId")
    date: str
    time: str
    service: str
    status: BookingStatus = BookingStatus.pending
    note: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        populate_by_name = True


class BookedUser(BaseModel):
    id: Optional[str] = None
    name: str
    email: str


class BookingView(BaseModel):
    """A booking joined with its owner, as shown to administrators"""
    id: str
    user_id: str = Field(..., alias="userId")
    date: str
    time: str
    service: str
    status: BookingStatus
    note: str
    user: BookedUser

    class Config:
        populate_by_name = True


class MessageResponse(BaseModel):
    ok: bool = True
    message: str


class BookingCreated(MessageResponse):
    booking: BookingResponse


class BookingStatusResponse(MessageResponse):
    status: BookingStatus
    note: str
