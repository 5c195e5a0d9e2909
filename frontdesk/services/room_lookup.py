"""
Resolve the Room behind a booking's denormalized room number.

Room numbers are copied onto bookings at booking time and may have drifted
in representation since (" 101", "0101", 101). Strategies are tried in
order and the first match wins.
"""
from typing import Callable, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..models import Booking, Room

RoomLookup = Callable[[Session, Booking], Optional[Room]]


def by_room_number(db: Session, booking: Booking) -> Optional[Room]:
    return db.scalars(
        select(Room).where(Room.room_number == str(booking.room_number)).order_by(Room.id).limit(1)
    ).first()


def by_category_and_number(db: Session, booking: Booking) -> Optional[Room]:
    if booking.category_id is None:
        return None
    number = str(booking.room_number).strip()
    rooms = db.scalars(select(Room).where(Room.category_id == booking.category_id).order_by(Room.id))
    return next((r for r in rooms if r.room_number.strip() == number), None)


def _as_int(value) -> Optional[int]:
    """Integer value of a digit-only room number (surrounding spaces allowed)."""
    text = str(value).strip()
    if not text or not text.isascii() or not text.isdigit():
        return None
    return int(text)


def by_numeric_value(db: Session, booking: Booking) -> Optional[Room]:
    target = _as_int(booking.room_number)
    if target is None:
        return None
    # Narrow in SQL to room numbers equal to the target once spaces and
    # leading zeros are stripped; _as_int confirms the candidates
    stripped = func.ltrim(func.trim(Room.room_number), "0")
    rooms = db.scalars(select(Room).where(stripped == str(target).lstrip("0")).order_by(Room.id))
    return next((r for r in rooms if _as_int(r.room_number) == target), None)


LOOKUP_STRATEGIES: tuple[RoomLookup, ...] = (
    by_room_number,
    by_category_and_number,
    by_numeric_value,
)


def find_room_for_booking(db: Session, booking: Booking, strategies=LOOKUP_STRATEGIES) -> Optional[Room]:
    for strategy in strategies:
        room = strategy(db, booking)
        if room is not None:
            return room
    return None
