"""
Front-desk cash ledger and reconciliation report.

KEEP transactions are cash received at reception, SENT transactions are cash
handed over to the office. The report buckets them per source; every bucket
is computed with its own queries, so buckets are individually consistent but
not one snapshot.
"""
import logging
import math
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..db import commit
from ..errors import InvalidDateFormat, ValidationError
from ..models import CashSource, CashTransaction, CashType

logger = logging.getLogger(__name__)

FILTERS = ("today", "week", "month", "year", "date")


def add_transaction(
    db: Session,
    amount: Any,
    type: Any,
    source: Any,
    description: Optional[str] = None,
    receptionist_id: Optional[int] = None,
) -> CashTransaction:
    if isinstance(amount, bool):
        raise ValidationError("Amount must be a positive number")
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationError("Amount must be a positive number") from None
    if not value.is_finite() or value <= 0:
        raise ValidationError("Amount must be a positive number")

    kind = str(type or "").strip().upper()
    if kind not in (CashType.KEEP.value, CashType.SENT.value):
        raise ValidationError("Type must be either KEEP or SENT")

    valid = ", ".join(s.value for s in CashSource)
    if not source or not isinstance(source, str):
        raise ValidationError(f"Source is required. Valid sources: {valid}")
    try:
        bucket = CashSource.parse(source)
    except ValueError:
        raise ValidationError(f"Source is required. Valid sources: {valid}") from None

    tx = CashTransaction(
        amount=value,
        type=kind,
        source=bucket.value,
        description=description or "",
        receptionist_id=receptionist_id,
    )
    db.add(tx)
    commit(db)
    db.refresh(tx)
    logger.info("Cash %s of %s recorded for %s", kind, value, bucket.value)
    return tx


def resolve_window(
    filter: Optional[str],
    date_value: Optional[str] = None,
    now: Optional[datetime] = None,
) -> tuple[Optional[datetime], Optional[datetime]]:
    """
    Inclusive [start, end] bounds in server-local time for a report filter,
    or (None, None) for an unbounded report. Weeks start on Sunday and end
    with today.
    """
    if not filter:
        return None, None
    if filter not in FILTERS:
        raise ValidationError(f"Unknown filter '{filter}'. Valid filters: {', '.join(FILTERS)}")

    now = now or datetime.now()
    today = now.date()

    if filter == "today":
        return _day_start(today), _day_end(today)
    if filter == "week":
        # date.weekday(): Monday=0 .. Sunday=6
        sunday = today - timedelta(days=(today.weekday() + 1) % 7)
        return _day_start(sunday), _day_end(today)
    if filter == "month":
        first = today.replace(day=1)
        next_first = (first + timedelta(days=32)).replace(day=1)
        return _day_start(first), _day_end(next_first - timedelta(days=1))
    if filter == "year":
        return _day_start(date(today.year, 1, 1)), _day_end(date(today.year, 12, 31))

    # filter == "date"
    if not date_value:
        return None, None
    try:
        parsed = datetime.fromisoformat(date_value.strip())
    except ValueError:
        raise InvalidDateFormat() from None
    if parsed.tzinfo is not None:
        # Windows are server-local days
        parsed = parsed.astimezone().replace(tzinfo=None)
    day = parsed.date()
    return _day_start(day), _day_end(day)


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min)


def _day_end(day: date) -> datetime:
    return datetime.combine(day, time.max)


def _pagination(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "totalPages": math.ceil(total / limit) if limit else 0,
        "totalTransactions": total,
    }


def _check_paging(page: int, limit: int) -> None:
    if page < 1:
        raise ValidationError("page must be 1 or greater")
    if limit < 1:
        raise ValidationError("limit must be 1 or greater")


def list_transactions(db: Session, page: int = 1, limit: int = 10) -> dict:
    _check_paging(page, limit)
    total = db.scalar(select(func.count(CashTransaction.id))) or 0
    transactions = list(db.scalars(
        select(CashTransaction)
        .order_by(CashTransaction.created_at.desc(), CashTransaction.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ))
    return {"pagination": _pagination(page, limit, total), "transactions": transactions}


def _sum(db: Session, conditions: list, kind: CashType) -> Decimal:
    total = db.scalar(
        select(func.coalesce(func.sum(CashTransaction.amount), 0))
        .where(*conditions, CashTransaction.type == kind.value)
    )
    return Decimal(str(total or 0))


def source_card(db: Session, source: CashSource, start, end, page: int, limit: int) -> dict:
    conditions = [CashTransaction.source == source.value]
    if start is not None and end is not None:
        conditions += [CashTransaction.created_at >= start, CashTransaction.created_at <= end]

    received = _sum(db, conditions, CashType.KEEP)
    sent = _sum(db, conditions, CashType.SENT)

    transactions = list(db.scalars(
        select(CashTransaction)
        .where(*conditions)
        .order_by(CashTransaction.created_at.desc(), CashTransaction.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ))
    total = db.scalar(select(func.count(CashTransaction.id)).where(*conditions)) or 0

    return {
        "summary": {
            "totalReceived": received,
            "totalSent": sent,
            "cashInReception": received - sent,
        },
        "breakdown": {
            "receivedBreakdown": [{"source": source.value, "total": received}] if received else [],
            "sentBreakdown": [{"source": source.value, "total": sent}] if sent else [],
        },
        "pagination": _pagination(page, limit, total),
        "transactions": transactions,
    }


def cash_report(
    db: Session,
    filter: Optional[str] = None,
    date_value: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    source: Optional[str] = None,
    now: Optional[datetime] = None,
) -> dict:
    """Per-source received/sent/net totals for a time window, with a page of transactions each."""
    _check_paging(page, limit)
    start, end = resolve_window(filter, date_value, now)

    sources = list(CashSource)
    if source:
        try:
            sources = [CashSource.parse(source)]
        except ValueError:
            raise ValidationError(f"Unknown source '{source}'") from None

    cards = {s.value: source_card(db, s, start, end, page, limit) for s in sources}
    return {"filterApplied": filter or "all", "cards": cards}
