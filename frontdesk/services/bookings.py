"""
Booking lifecycle: create, read, update, extend, unbook and delete.

A booking is either active or inactive. Deactivation ("unbook") is terminal
for the record and cascades into the room status and housekeeping. Every
public function that writes commits its own unit of work.
"""
import logging
from datetime import datetime
from typing import Any, Iterable, NamedTuple, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..db import commit
from ..errors import BookingNotFound, FrontDeskError, InactiveBooking, PersistenceError, ValidationError
from ..models import Booking, BookingExtension, HousekeepingTask, Room, RoomStatus
from .allocation import allocate_rooms
from .housekeeping import ensure_checkout_task
from .identifiers import generate_grc, generate_reference_number
from .room_lookup import find_room_for_booking

logger = logging.getLogger(__name__)

# Payload key -> Booking attribute for the nested sub-records
SUB_RECORDS = {
    "guestDetails": "guest_details",
    "contactDetails": "contact_details",
    "identityDetails": "identity_details",
    "bookingInfo": "booking_info",
    "paymentDetails": "payment_details",
    "vehicleDetails": "vehicle_details",
}

# Never writable through update
RESTRICTED_FIELDS = ("isActive", "referenceNumber", "createdAt", "id", "_id", "grcNo")


class UnbookResult(NamedTuple):
    booking: Booking
    room: Optional[Room]
    task: Optional[HousekeepingTask]
    task_created: bool


# ==== Helpers ====

def normalize_count(count: Any) -> int:
    """Room count for a request entry; anything but a positive integer means 1."""
    if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
        return 1
    return count


def _to_naive_local(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def parse_datetime(value: Any, field: str) -> datetime:
    if isinstance(value, datetime):
        return _to_naive_local(value)
    if not value or not isinstance(value, str):
        raise ValidationError(f"{field} is required")
    try:
        return _to_naive_local(datetime.fromisoformat(value.strip()))
    except ValueError:
        raise ValidationError(f"{field} is not a valid date: {value}") from None


def _parse_optional_datetime(value: Any) -> Optional[datetime]:
    # Stored sub-record dates are whatever the client sent; tolerate junk
    try:
        return parse_datetime(value, "date")
    except ValidationError:
        return None


def _parse_amount(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError("additionalAmount must be a number")
    try:
        amount = value if isinstance(value, (int, float)) else float(value)
    except (TypeError, ValueError):
        raise ValidationError("additionalAmount must be a number") from None
    if amount < 0:
        raise ValidationError("additionalAmount cannot be negative")
    return amount


_TRUE_STRINGS = ("true", "1")
_FALSE_STRINGS = ("false", "0")


def parse_flag(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ValidationError(f"{field} must be true or false")


def parse_room_count(value: Any, field: str) -> int:
    """Strict positive integer; numeric strings are accepted, bools are not."""
    if isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field} must be a positive integer")
    return value


def _as_number(value: Any):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


def _booking_query():
    return select(Booking).options(
        selectinload(Booking.category),
        selectinload(Booking.extension_history),
    )


# ==== Create ====

def book_category(db: Session, category_id: int, count: int, details: dict) -> list[Booking]:
    """Allocate `count` rooms in one category and create one booking per room."""
    try:
        category, rooms = allocate_rooms(db, category_id, count)
        bookings = []
        for room in rooms:
            booking = Booking(
                grc_no=generate_grc(db),
                reference_number=generate_reference_number(),
                reservation_id=str(details["reservationId"]) if details.get("reservationId") else None,
                category_id=category.id,
                room_number=room.room_number,
                is_active=True,
                number_of_rooms=1,
                guest_details=details.get("guestDetails"),
                contact_details=details.get("contactDetails"),
                identity_details=details.get("identityDetails"),
                booking_info=details.get("bookingInfo"),
                payment_details=details.get("paymentDetails"),
                vehicle_details=details.get("vehicleDetails") or {},
                vip=bool(details.get("vip") or False),
            )
            db.add(booking)
            bookings.append(booking)
    except FrontDeskError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Booking allocation failed for category %s", category_id)
        raise PersistenceError(f"Storage failure: {exc.__class__.__name__}") from exc

    commit(db)
    for booking in bookings:
        db.refresh(booking)
    logger.info(
        "Booked %d room(s) in %s: %s",
        len(bookings), category.name, ", ".join(b.grc_no for b in bookings),
    )
    return bookings


def create_bookings(db: Session, entries: Iterable[dict]) -> list[Booking]:
    """
    Book every entry in order. Each entry is committed before the next one is
    attempted; the first failure propagates and earlier entries stay booked.
    """
    booked: list[Booking] = []
    for entry in entries:
        details = dict(entry)
        category_id = details.pop("categoryId", None)
        if category_id is None or category_id == "":
            raise ValidationError("categoryId is required")
        count = normalize_count(details.pop("count", None))
        booked.extend(book_category(db, category_id, count, details))
    return booked


# ==== Read ====

def get_booking(db: Session, booking_id: int) -> Booking:
    booking = db.scalars(_booking_query().where(Booking.id == booking_id)).first()
    if booking is None:
        raise BookingNotFound()
    return booking


def get_booking_by_grc(db: Session, grc_no: str) -> Booking:
    booking = db.scalars(_booking_query().where(Booking.grc_no == grc_no)).first()
    if booking is None:
        raise BookingNotFound("Booking not found with given GRC")
    return booking


def list_bookings(db: Session, include_inactive: bool = False) -> list[Booking]:
    q = _booking_query()
    if not include_inactive:
        q = q.where(Booking.is_active.is_(True))
    return list(db.scalars(q.order_by(Booking.id)))


def list_bookings_by_category(db: Session, category_id: int) -> list[Booking]:
    return list(db.scalars(_booking_query().where(Booking.category_id == category_id).order_by(Booking.id)))


# ==== Extend / Update ====

def apply_extension(
    booking: Booking,
    extended_check_out: Any,
    reason: Optional[str] = None,
    additional_amount: Any = None,
    payment_mode: Optional[str] = None,
    approved_by: Optional[str] = None,
) -> BookingExtension:
    """
    Move the checkout date of an active booking and record the change.
    The additional amount, when given, is added to paymentDetails.totalAmount.
    Does not commit.
    """
    if not booking.is_active:
        raise InactiveBooking()
    new_check_out = parse_datetime(extended_check_out, "extendedCheckOut")
    amount = _parse_amount(additional_amount)

    info = dict(booking.booking_info or {})
    record = BookingExtension(
        original_check_in=_parse_optional_datetime(info.get("checkIn")),
        original_check_out=_parse_optional_datetime(info.get("checkOut")),
        extended_check_out=new_check_out,
        reason=reason,
        additional_amount=amount,
        payment_mode=payment_mode,
        approved_by=approved_by,
    )
    booking.extension_history.append(record)

    info["checkOut"] = new_check_out.isoformat()
    booking.booking_info = info

    if amount:
        payment = dict(booking.payment_details or {})
        payment["totalAmount"] = _as_number(payment.get("totalAmount")) + amount
        booking.payment_details = payment

    logger.info("Extended booking %s to %s", booking.grc_no, new_check_out.isoformat())
    return record


def extend_booking(
    db: Session,
    booking_id: int,
    extended_check_out: Any,
    reason: Optional[str] = None,
    additional_amount: Any = None,
    payment_mode: Optional[str] = None,
    approved_by: Optional[str] = None,
) -> Booking:
    try:
        booking = get_booking(db, booking_id)
        apply_extension(booking, extended_check_out, reason, additional_amount, payment_mode, approved_by)
    except FrontDeskError:
        db.rollback()
        raise
    commit(db)
    db.refresh(booking)
    return booking


def _apply_updates(booking: Booking, updates: dict) -> None:
    for key, attr in SUB_RECORDS.items():
        patch = updates.get(key)
        if not patch:
            continue
        if not isinstance(patch, dict):
            raise ValidationError(f"{key} must be an object")
        setattr(booking, attr, {**(getattr(booking, attr) or {}), **patch})

    if updates.get("roomNumber") not in (None, ""):
        booking.room_number = str(updates["roomNumber"])
    if updates.get("numberOfRooms") not in (None, ""):
        booking.number_of_rooms = parse_room_count(updates["numberOfRooms"], "numberOfRooms")
    if updates.get("vip") is not None:
        booking.vip = parse_flag(updates["vip"], "vip")
    if updates.get("reservationId"):
        booking.reservation_id = str(updates["reservationId"])
    if updates.get("status"):
        booking.status = str(updates["status"])

    for key in ("actualCheckInTime", "actualCheckOutTime"):
        if updates.get(key):
            info = dict(booking.booking_info or {})
            info[key] = parse_datetime(updates[key], key).isoformat()
            booking.booking_info = info

    if updates.get("extendedCheckOut"):
        apply_extension(
            booking,
            updates["extendedCheckOut"],
            reason=updates.get("reason"),
            additional_amount=updates.get("additionalAmount"),
            payment_mode=updates.get("paymentMode"),
            approved_by=updates.get("approvedBy"),
        )


def update_booking(db: Session, booking_id: int, updates: dict) -> Booking:
    """
    Partial update. Sub-records are shallow-merged, scalar fields are replaced
    only when present, identity and audit fields are ignored.
    """
    updates = {k: v for k, v in (updates or {}).items() if k not in RESTRICTED_FIELDS}
    try:
        booking = get_booking(db, booking_id)
        _apply_updates(booking, updates)
    except FrontDeskError:
        db.rollback()
        raise

    commit(db)
    db.refresh(booking)
    logger.info("Updated booking %s", booking.grc_no)
    return booking


# ==== Unbook / Delete ====

def deactivate_booking(db: Session, booking_id: int) -> UnbookResult:
    """
    Mark the booking inactive, put its room into maintenance and queue a
    checkout cleaning task. Room side-effects run even when the booking was
    already inactive; a booking whose room cannot be found still succeeds.
    """
    booking = get_booking(db, booking_id)
    if booking.is_active:
        booking.is_active = False
    else:
        logger.info("Booking %s was already inactive, proceeding with room status update", booking.grc_no)

    room = find_room_for_booking(db, booking)
    task, created = None, False
    if room is None:
        logger.warning("No room matches %r for booking %s; room status left unchanged", booking.room_number, booking.grc_no)
    else:
        room.status = RoomStatus.MAINTENANCE.value
        task, created = ensure_checkout_task(db, room)

    commit(db)
    logger.info("Unbooked %s (room %s)", booking.grc_no, room.room_number if room else "-")
    return UnbookResult(booking=booking, room=room, task=task, task_created=created)


def delete_booking(db: Session, booking_id: int) -> None:
    """Hard delete for administrative corrections. Rooms and housekeeping are left alone."""
    booking = db.get(Booking, booking_id)
    if booking is None:
        raise BookingNotFound()
    grc_no = booking.grc_no
    db.delete(booking)
    commit(db)
    logger.info("Permanently deleted booking %s", grc_no)
