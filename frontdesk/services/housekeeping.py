import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import HousekeepingTask, Room, TaskStatus, OPEN_TASK_STATUSES

logger = logging.getLogger(__name__)

CHECKOUT_NOTES = "Room needs cleaning after checkout"


def ensure_checkout_task(db: Session, room: Room) -> tuple[HousekeepingTask, bool]:
    """
    Make sure the room has an open (pending or in-progress) cleaning task.
    Returns the open task and whether it was created by this call.

    Check-then-create: two concurrent checkouts of the same room can both
    create a task. The caller commits.
    """
    existing = db.scalars(
        select(HousekeepingTask)
        .where(HousekeepingTask.room_id == room.id, HousekeepingTask.status.in_(OPEN_TASK_STATUSES))
        .limit(1)
    ).first()
    if existing is not None:
        logger.info("Room %s already has open housekeeping task %s", room.room_number, existing.id)
        return existing, False

    task = HousekeepingTask(
        room_id=room.id,
        cleaning_type="checkout",
        notes=CHECKOUT_NOTES,
        priority="high",
        status=TaskStatus.PENDING.value,
    )
    db.add(task)
    db.flush()
    logger.info("Created checkout housekeeping task for room %s", room.room_number)
    return task, True
