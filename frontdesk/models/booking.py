from __future__ import annotations
from datetime import datetime
from typing import TYPE_CHECKING, Optional
from sqlalchemy import Integer, String, ForeignKey, DateTime, Boolean, Numeric, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..db import Base

if TYPE_CHECKING:
    from .category import Category

class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    grc_no: Mapped[str] = mapped_column(String(20), unique=True, nullable=False, index=True)
    reference_number: Mapped[str] = mapped_column(String(20), nullable=False)
    reservation_id: Mapped[str | None] = mapped_column(String(100))
    # Not enforced as a constraint: categories may be removed from the catalog
    category_id: Mapped[int | None] = mapped_column(ForeignKey("categories.id"), index=True)
    room_number: Mapped[str] = mapped_column(String(20), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    number_of_rooms: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    status: Mapped[str | None] = mapped_column(String(30))
    vip: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Nested sub-records; reassign (never mutate in place) so changes are tracked
    guest_details: Mapped[dict | None] = mapped_column(JSON)
    contact_details: Mapped[dict | None] = mapped_column(JSON)
    identity_details: Mapped[dict | None] = mapped_column(JSON)
    booking_info: Mapped[dict | None] = mapped_column(JSON)
    payment_details: Mapped[dict | None] = mapped_column(JSON)
    vehicle_details: Mapped[dict | None] = mapped_column(JSON)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Relationships
    category: Mapped[Optional[Category]] = relationship()
    extension_history: Mapped[list[BookingExtension]] = relationship(
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="BookingExtension.id",
    )

class BookingExtension(Base):
    """One checkout-date change. Rows are appended, never edited."""

    __tablename__ = "booking_extensions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    booking_id: Mapped[int] = mapped_column(ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    original_check_in: Mapped[datetime | None] = mapped_column(DateTime)
    original_check_out: Mapped[datetime | None] = mapped_column(DateTime)
    extended_check_out: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    reason: Mapped[str | None] = mapped_column(String(500))
    additional_amount: Mapped[float | None] = mapped_column(Numeric(12, 2))
    payment_mode: Mapped[str | None] = mapped_column(String(50))
    approved_by: Mapped[str | None] = mapped_column(String(100))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    booking: Mapped[Booking] = relationship(back_populates="extension_history")
