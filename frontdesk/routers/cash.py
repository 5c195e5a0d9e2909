from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..errors import ValidationError
from ..limiter import limiter
from ..services import cash as cash_service
from ..services.reporting import generate_csv_report, generate_pdf_report

router = APIRouter(prefix="/api/v1/cash", tags=["cash"])

# ==== Schemas ====

class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

class CashTransactionIn(CamelModel):
    amount: Any = None
    type: Optional[str] = None
    source: Optional[str] = None
    description: Optional[str] = None
    receptionist_id: Optional[int] = None

class CashTransactionOut(CamelModel):
    id: int
    amount: float
    type: str
    source: str
    description: str
    receptionist_id: Optional[int] = None
    created_at: datetime

class TransactionCreatedOut(BaseModel):
    message: str
    transaction: CashTransactionOut

class PaginationOut(CamelModel):
    page: int
    limit: int
    total_pages: int
    total_transactions: int

class TransactionPageOut(CamelModel):
    pagination: PaginationOut
    transactions: List[CashTransactionOut]

class SummaryOut(CamelModel):
    total_received: float
    total_sent: float
    cash_in_reception: float

class BreakdownItemOut(CamelModel):
    source: str
    total: float

class BreakdownOut(CamelModel):
    received_breakdown: List[BreakdownItemOut]
    sent_breakdown: List[BreakdownItemOut]

class SourceCardOut(CamelModel):
    summary: SummaryOut
    breakdown: BreakdownOut
    pagination: PaginationOut
    transactions: List[CashTransactionOut]

class CashReportOut(CamelModel):
    filter_applied: str
    cards: Dict[str, SourceCardOut]

# ==== Endpoints ====

@router.post("/transactions", response_model=TransactionCreatedOut, status_code=201)
@limiter.limit(settings.RATE_LIMIT_WRITE)
def add_transaction(request: Request, payload: CashTransactionIn, db: Session = Depends(get_db)):
    tx = cash_service.add_transaction(
        db,
        amount=payload.amount,
        type=payload.type,
        source=payload.source,
        description=payload.description,
        receptionist_id=payload.receptionist_id,
    )
    return {"message": "Transaction added successfully", "transaction": tx}

@router.get("/transactions", response_model=TransactionPageOut)
def list_transactions(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.CASH_PAGE_SIZE, ge=1, le=settings.CASH_PAGE_SIZE_MAX),
    db: Session = Depends(get_db),
):
    return cash_service.list_transactions(db, page=page, limit=limit)

@router.get("/report", response_model=CashReportOut)
def cash_report(
    filter: Optional[str] = None,
    date_value: Optional[str] = Query(None, alias="date"),
    source: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.CASH_PAGE_SIZE, ge=1, le=settings.CASH_PAGE_SIZE_MAX),
    db: Session = Depends(get_db),
):
    return cash_service.cash_report(db, filter=filter, date_value=date_value, page=page, limit=limit, source=source)

@router.get("/report/export")
def export_cash_report(
    format: str = "csv",
    filter: Optional[str] = None,
    date_value: Optional[str] = Query(None, alias="date"),
    db: Session = Depends(get_db),
):
    if format not in ("csv", "pdf"):
        raise ValidationError("format must be csv or pdf")
    # Only the totals are exported; one transaction per card is enough
    report = cash_service.cash_report(db, filter=filter, date_value=date_value, page=1, limit=1)
    stamp = datetime.now().strftime("%Y%m%d")
    name = f"cash-report-{report['filterApplied']}-{stamp}.{format}"
    headers = {"Content-Disposition": f'attachment; filename="{name}"'}
    if format == "csv":
        return Response(content=generate_csv_report(report), media_type="text/csv", headers=headers)
    pdf = generate_pdf_report(report, settings.APP_NAME)
    return Response(content=pdf, media_type="application/pdf", headers=headers)
