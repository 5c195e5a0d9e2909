import re
from datetime import datetime
from decimal import Decimal
from enum import Enum
from sqlalchemy import Integer, String, DateTime, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column
from ..db import Base

class CashType(str, Enum):
    KEEP = "KEEP"  # received at reception
    SENT = "SENT"  # sent to the office

class CashSource(str, Enum):
    RESTAURANT = "RESTAURANT"
    ROOM_BOOKING = "ROOM_BOOKING"
    BANQUET_PARTY = "BANQUET+PARTY"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, raw: str) -> "CashSource":
        """Accepts loose spellings such as 'room booking' or 'Banquet + Party'."""
        key = re.sub(r"\s*\+\s*", "+", raw.strip().upper())
        key = re.sub(r"\s+", "_", key)
        return cls(key)

class CashTransaction(Base):
    __tablename__ = "cash_transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    source: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    # Staff records live in the auth service; no foreign key
    receptionist_id: Mapped[int | None] = mapped_column(Integer)
    # Naive server-local time; report windows are computed in local time too
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, index=True)
