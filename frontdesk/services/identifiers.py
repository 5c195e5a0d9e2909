import random

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..config import settings
from ..models import Booking


def generate_grc(db: Session) -> str:
    """
    Return a guest registration code (e.g. GRC-4821) not used by any booking.
    Pending bookings in the session are flushed first so codes handed out
    earlier in the same unit of work are seen. The 4-digit space holds 9000
    codes and the loop has no retry bound.
    """
    db.flush()
    while True:
        grc_no = f"{settings.GRC_PREFIX}-{random.randint(1000, 9999)}"
        exists = db.scalar(select(Booking.id).where(Booking.grc_no == grc_no).limit(1))
        if exists is None:
            return grc_no


def generate_reference_number() -> str:
    # Not checked for uniqueness
    return f"{settings.REFERENCE_PREFIX}-{random.randint(100000, 999999)}"
