from enum import Enum
from sqlalchemy import Integer, String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..db import Base

class RoomStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    MAINTENANCE = "maintenance"
    CLEANING = "cleaning"

class Room(Base):
    __tablename__ = "rooms"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    room_number: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id"), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), default=RoomStatus.AVAILABLE.value, nullable=False)

    category: Mapped["Category"] = relationship(back_populates="rooms")
    housekeeping_tasks: Mapped[list["HousekeepingTask"]] = relationship(back_populates="room")
