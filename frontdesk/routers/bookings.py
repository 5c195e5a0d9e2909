from datetime import datetime
from typing import Any, Optional, List

from fastapi import APIRouter, Body, Depends, Request
from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..limiter import limiter
from ..services import bookings as booking_service

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])

# ==== Schemas ====

class CategoryOut(BaseModel):
    id: Optional[int] = None
    name: str

    class Config:
        from_attributes = True

class ExtensionOut(BaseModel):
    original_check_in: Optional[datetime] = None
    original_check_out: Optional[datetime] = None
    extended_check_out: datetime
    reason: Optional[str] = None
    additional_amount: Optional[float] = None
    payment_mode: Optional[str] = None
    approved_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

class BookingOut(BaseModel):
    id: int
    grc_no: str
    reference_number: str
    reservation_id: Optional[str] = None
    category_id: Optional[int] = None
    category: CategoryOut
    room_number: str
    is_active: bool
    number_of_rooms: int
    status: Optional[str] = None
    vip: bool
    guest_details: Optional[dict] = None
    contact_details: Optional[dict] = None
    identity_details: Optional[dict] = None
    booking_info: Optional[dict] = None
    payment_details: Optional[dict] = None
    vehicle_details: Optional[dict] = None
    extension_history: List[ExtensionOut] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

    @field_validator("category", mode="before")
    @classmethod
    def unknown_category(cls, value):
        # Orphaned category references are shown, not rejected
        return value if value is not None else {"name": "Unknown"}

class BookingEntryIn(BaseModel):
    category_id: Optional[int] = None
    count: Any = None
    guest_details: Optional[dict] = None
    contact_details: Optional[dict] = None
    identity_details: Optional[dict] = None
    booking_info: Optional[dict] = None
    payment_details: Optional[dict] = None
    vehicle_details: Optional[dict] = None
    vip: Optional[bool] = None
    reservation_id: Optional[str | int] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

class BookingCreateIn(BookingEntryIn):
    bookings: Optional[List[BookingEntryIn]] = None

class ExtendIn(BaseModel):
    extended_check_out: Optional[str] = None
    reason: Optional[str] = None
    additional_amount: Optional[float] = None
    payment_mode: Optional[str] = None
    approved_by: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

class BookedOut(BaseModel):
    success: bool = True
    booked: List[BookingOut]

class BookingEnvelope(BaseModel):
    success: bool = True
    booking: BookingOut

class BookingChangedOut(BookingEnvelope):
    message: str

class MessageOut(BaseModel):
    success: bool = True
    message: str

# ==== Endpoints ====

@router.post("/book", response_model=BookedOut, status_code=201)
@limiter.limit(settings.RATE_LIMIT_WRITE)
def book_rooms(request: Request, payload: BookingCreateIn, db: Session = Depends(get_db)):
    if payload.bookings is not None:
        entries = [e.model_dump(by_alias=True, exclude_unset=True) for e in payload.bookings]
    else:
        entries = [payload.model_dump(by_alias=True, exclude_unset=True, exclude={"bookings"})]
    booked = booking_service.create_bookings(db, entries)
    return {"success": True, "booked": booked}

@router.get("/all", response_model=List[BookingOut])
def list_bookings(all: bool = False, db: Session = Depends(get_db)):
    return booking_service.list_bookings(db, include_inactive=all)

@router.get("/category/{category_id}", response_model=List[BookingOut])
def bookings_by_category(category_id: int, db: Session = Depends(get_db)):
    return booking_service.list_bookings_by_category(db, category_id)

@router.get("/grc/{grc_no}", response_model=BookingEnvelope)
def booking_by_grc(grc_no: str, db: Session = Depends(get_db)):
    return {"success": True, "booking": booking_service.get_booking_by_grc(db, grc_no)}

@router.delete("/unbook/{booking_id}", response_model=MessageOut)
def unbook(booking_id: int, db: Session = Depends(get_db)):
    result = booking_service.deactivate_booking(db, booking_id)
    if result.room is None:
        message = "Booking deactivated. No matching room found; room status unchanged."
    elif result.task_created:
        message = "Room set to maintenance status. Housekeeping task created."
    else:
        message = "Room set to maintenance status. Housekeeping task already open."
    return {"success": True, "message": message}

@router.delete("/delete/{booking_id}", response_model=MessageOut)
def delete_permanently(booking_id: int, db: Session = Depends(get_db)):
    booking_service.delete_booking(db, booking_id)
    return {"success": True, "message": "Booking permanently deleted"}

@router.put("/update/{booking_id}", response_model=BookingChangedOut)
def update_booking(booking_id: int, updates: dict = Body(...), db: Session = Depends(get_db)):
    booking = booking_service.update_booking(db, booking_id, updates)
    return {"success": True, "message": "Booking updated successfully", "booking": booking}

@router.post("/extend/{booking_id}", response_model=BookingChangedOut)
def extend_booking(booking_id: int, payload: ExtendIn, db: Session = Depends(get_db)):
    booking = booking_service.extend_booking(
        db,
        booking_id,
        payload.extended_check_out,
        reason=payload.reason,
        additional_amount=payload.additional_amount,
        payment_mode=payload.payment_mode,
        approved_by=payload.approved_by,
    )
    return {"success": True, "message": "Booking extended successfully", "booking": booking}

# Declared last so the fixed paths above take precedence
@router.get("/{booking_id}", response_model=BookingEnvelope)
def booking_by_id(booking_id: int, db: Session = Depends(get_db)):
    return {"success": True, "booking": booking_service.get_booking(db, booking_id)}
