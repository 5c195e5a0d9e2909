import logging

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..errors import CategoryNotFound, InsufficientAvailability
from ..models import Category, Room, RoomStatus

logger = logging.getLogger(__name__)


def _claim(db: Session, room: Room) -> bool:
    """Flip one room available -> booked only if it is still available."""
    result = db.execute(
        update(Room)
        .where(Room.id == room.id, Room.status == RoomStatus.AVAILABLE.value)
        .values(status=RoomStatus.BOOKED.value)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        return False
    room.status = RoomStatus.BOOKED.value
    return True


def allocate_rooms(db: Session, category_id: int, count: int) -> tuple[Category, list[Room]]:
    """
    Reserve `count` available rooms of a category and mark them booked.

    Nothing is committed here; the caller commits once the bookings for the
    rooms are in place. On failure the session is rolled back so no room of
    this request stays claimed.
    """
    category = db.get(Category, category_id)
    if category is None:
        raise CategoryNotFound(category_id)

    available = (
        select(Room)
        .where(Room.category_id == category_id, Room.status == RoomStatus.AVAILABLE.value)
        .order_by(Room.id)
    )
    candidates = list(db.scalars(available.limit(count)))
    if len(candidates) < count:
        raise InsufficientAvailability(category.name, count, len(candidates))

    claimed: list[Room] = []
    tried: set[int] = set()
    while len(claimed) < count:
        if not candidates:
            # Lost races drained the pool; look for rooms we have not tried yet
            candidates = list(
                db.scalars(available.where(Room.id.not_in(tried)).limit(count - len(claimed)))
            )
            if not candidates:
                db.rollback()
                raise InsufficientAvailability(category.name, count, len(claimed))
        room = candidates.pop(0)
        tried.add(room.id)
        if _claim(db, room):
            claimed.append(room)
        else:
            logger.warning("Room %s was taken concurrently, trying another", room.room_number)

    logger.debug("Allocated rooms %s in %s", [r.room_number for r in claimed], category.name)
    return category, claimed
