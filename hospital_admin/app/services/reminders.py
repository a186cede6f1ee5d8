from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from hospital_admin.app.core.config import settings
from hospital_admin.app.models.supplier import (
    PaymentStatus,
    POPaymentStatus,
    POStatus,
    PurchaseOrder,
    SupplierPayment,
)
from hospital_admin.app.services.aging import ZERO, days_between
from hospital_admin.app.services.payables import format_amount, paid_amounts_by_po


def _payment_entry(p: SupplierPayment, as_of_date: date) -> dict:
    return {
        "kind": "PAYMENT",
        "id": str(p.id),
        "reference": p.reference_number,
        "supplier": p.supplier.name,
        "due_date": p.due_date.isoformat(),
        "days_overdue": max(0, days_between(p.due_date, as_of_date)),
        "days_until_due": max(0, days_between(as_of_date, p.due_date)),
        "amount": Decimal(str(p.amount)),
    }


def _po_entry(po: PurchaseOrder, pending: Decimal, as_of_date: date) -> dict:
    due = po.payment_due_date
    return {
        "kind": "PURCHASE_ORDER",
        "id": str(po.id),
        "reference": po.po_number,
        "supplier": po.supplier.name,
        "due_date": due.isoformat() if due else None,
        "days_overdue": max(0, days_between(due, as_of_date)) if due else 0,
        "days_until_due": max(0, days_between(as_of_date, due)) if due else 0,
        "amount": pending,
    }


def get_payment_reminders(
    db: Session,
    as_of_date: date,
    window_days: int | None = None,
) -> dict:
    """Overdue and soon-due supplier payments and purchase orders.

    Upcoming means due between *as_of_date* and *window_days* later,
    both inclusive. Only received orders and payments not tied to an order
    are listed, the same obligations the aging summary counts; purchase
    order amounts are what is still unpaid.
    """
    if window_days is None:
        window_days = settings.REMINDER_WINDOW_DAYS
    if window_days < 0:
        raise ValueError("window_days must be non-negative")
    horizon = as_of_date + timedelta(days=window_days)

    open_payments = (
        db.query(SupplierPayment)
        .options(joinedload(SupplierPayment.supplier))
        .filter(
            SupplierPayment.purchase_order_id.is_(None),
            SupplierPayment.status.notin_([PaymentStatus.COMPLETED, PaymentStatus.CANCELLED]),
            SupplierPayment.due_date.is_not(None),
            SupplierPayment.due_date <= horizon,
        )
        .order_by(SupplierPayment.due_date.asc())
        .all()
    )
    overdue_payments = [p for p in open_payments if p.due_date < as_of_date]
    upcoming_payments = [p for p in open_payments if p.due_date >= as_of_date]

    open_pos = (
        db.query(PurchaseOrder)
        .options(joinedload(PurchaseOrder.supplier))
        .filter(
            PurchaseOrder.status == POStatus.RECEIVED,
            PurchaseOrder.payment_status != POPaymentStatus.PAID,
            or_(
                PurchaseOrder.payment_status == POPaymentStatus.OVERDUE,
                PurchaseOrder.payment_due_date <= horizon,
            ),
        )
        .order_by(PurchaseOrder.payment_due_date.asc())
        .all()
    )
    overdue_pos = [
        po for po in open_pos
        if po.payment_status == POPaymentStatus.OVERDUE
        or (po.payment_due_date is not None and po.payment_due_date < as_of_date)
    ]
    upcoming_pos = [po for po in open_pos if po not in overdue_pos]

    paid = paid_amounts_by_po(db)

    def pending_of(po: PurchaseOrder) -> Decimal:
        return max(ZERO, Decimal(str(po.total_amount)) - paid.get(po.id, ZERO))

    overdue = [_po_entry(po, pending_of(po), as_of_date) for po in overdue_pos]
    overdue += [_payment_entry(p, as_of_date) for p in overdue_payments]
    upcoming = [_po_entry(po, pending_of(po), as_of_date) for po in upcoming_pos]
    upcoming += [_payment_entry(p, as_of_date) for p in upcoming_payments]

    # Fully paid orders whose status was not refreshed have nothing to remind.
    overdue = [e for e in overdue if e["amount"] > ZERO]
    upcoming = [e for e in upcoming if e["amount"] > ZERO]

    overdue.sort(key=lambda e: -e["days_overdue"])
    upcoming.sort(key=lambda e: e["days_until_due"])

    total_overdue = sum((e["amount"] for e in overdue), ZERO)
    total_upcoming = sum((e["amount"] for e in upcoming), ZERO)

    for entry in overdue + upcoming:
        entry["amount"] = format_amount(entry["amount"])

    return {
        "as_of_date": str(as_of_date),
        "window_days": window_days,
        "overdue": overdue,
        "upcoming": upcoming,
        "overdue_count": len(overdue),
        "upcoming_count": len(upcoming),
        "total_overdue": format_amount(total_overdue),
        "total_upcoming": format_amount(total_upcoming),
        "has_reminders": bool(overdue or upcoming),
    }
