from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from hospital_admin.app.core.database import get_db
from hospital_admin.app.schemas.aging import AgingSummaryResponse, SupplierAgingResponse
from hospital_admin.app.schemas.reports import ExpiryAlertsResponse, PaymentRemindersResponse
from hospital_admin.app.services.expiry import get_expiry_alerts as _get_expiry_alerts
from hospital_admin.app.services.payables import (
    get_aging_summary as _get_aging_summary,
    get_supplier_aging as _get_supplier_aging,
)
from hospital_admin.app.services.reminders import (
    get_payment_reminders as _get_payment_reminders,
)

router = APIRouter()


# ── Aging Summary ──────────────────────────────────────────────────────────


@router.get("/aging-summary", response_model=AgingSummaryResponse)
def aging_summary(
    as_of_date: date | None = Query(None),
    db: Session = Depends(get_db),
) -> dict[str, object]:
    if as_of_date is None:
        as_of_date = date.today()
    return _get_aging_summary(db, as_of_date)


# ── Supplier Aging ─────────────────────────────────────────────────────────


@router.get("/supplier-aging", response_model=SupplierAgingResponse)
def supplier_aging(
    as_of_date: date | None = Query(None),
    db: Session = Depends(get_db),
) -> dict[str, object]:
    if as_of_date is None:
        as_of_date = date.today()
    return _get_supplier_aging(db, as_of_date)


# ── Payment Reminders ──────────────────────────────────────────────────────


@router.get("/payment-reminders", response_model=PaymentRemindersResponse)
def payment_reminders(
    as_of_date: date | None = Query(None),
    window_days: int | None = Query(None, ge=0, le=365),
    db: Session = Depends(get_db),
) -> dict[str, object]:
    if as_of_date is None:
        as_of_date = date.today()
    return _get_payment_reminders(db, as_of_date, window_days)


# ── Expiry Alerts ──────────────────────────────────────────────────────────


@router.get("/expiry-alerts", response_model=ExpiryAlertsResponse)
def expiry_alerts(
    as_of_date: date | None = Query(None),
    period: str | None = Query(None),
    db: Session = Depends(get_db),
) -> dict[str, object]:
    if as_of_date is None:
        as_of_date = date.today()
    try:
        return _get_expiry_alerts(db, as_of_date, period)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
