"""Supplier payables: map stored orders/payments to obligations and age them."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from hospital_admin.app.models.supplier import (
    PaymentStatus,
    POPaymentStatus,
    POStatus,
    PurchaseOrder,
    SupplierPayment,
)
from hospital_admin.app.services.aging import (
    PAYABLE_BUCKETS,
    ZERO,
    AgingSummary,
    Obligation,
    classify,
    compute_aging,
    days_between,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def format_amount(value: Decimal) -> str:
    """Money as a two-decimal string, whatever scale the row was loaded with."""
    return str(Decimal(value).quantize(CENT))


def resolve_due_date(po: PurchaseOrder) -> date | None:
    """Due date used for aging: payment due date, else GRN date, else order date."""
    return po.payment_due_date or po.grn_date or po.order_date


def paid_amounts_by_po(db: Session) -> dict[UUID, Decimal]:
    """Sum of completed payments linked to each purchase order."""
    rows = (
        db.query(
            SupplierPayment.purchase_order_id,
            func.coalesce(func.sum(SupplierPayment.amount), 0),
        )
        .filter(
            SupplierPayment.purchase_order_id.is_not(None),
            SupplierPayment.status == PaymentStatus.COMPLETED,
        )
        .group_by(SupplierPayment.purchase_order_id)
        .all()
    )
    return {po_id: Decimal(str(total)) for po_id, total in rows}


def paid_amount_for_po(db: Session, po_id: UUID) -> Decimal:
    total = (
        db.query(func.coalesce(func.sum(SupplierPayment.amount), 0))
        .filter(
            SupplierPayment.purchase_order_id == po_id,
            SupplierPayment.status == PaymentStatus.COMPLETED,
        )
        .scalar()
    )
    return Decimal(str(total))


def _collect(db: Session) -> list[tuple[Obligation, dict]]:
    """Obligations with the source row details the supplier report needs.

    Orders and payments are read in the same session so both reflect one
    snapshot of the store.
    """
    paid = paid_amounts_by_po(db)

    pos = (
        db.query(PurchaseOrder)
        .options(joinedload(PurchaseOrder.supplier))
        .filter(
            PurchaseOrder.status == POStatus.RECEIVED,
            PurchaseOrder.payment_status != POPaymentStatus.PAID,
        )
        .order_by(PurchaseOrder.order_date.asc())
        .all()
    )
    collected: list[tuple[Obligation, dict]] = []
    for po in pos:
        ob = Obligation(
            id=f"po:{po.id}",
            counterparty_name=po.supplier.name,
            total_amount=Decimal(str(po.total_amount)),
            paid_amount=paid.get(po.id, ZERO),
            due_date=resolve_due_date(po),
        )
        collected.append((ob, {
            "supplier_id": po.supplier_id,
            "source": "PURCHASE_ORDER",
            "po_number": po.po_number,
            "grn_number": po.grn_number,
            "invoice_number": po.invoice_number,
            "invoice_date": po.invoice_date,
            "order_date": po.order_date,
            "grn_date": po.grn_date,
            "payment_due_date": po.payment_due_date,
        }))

    # Scheduled payments not tied to an order are obligations on their own.
    standalone = (
        db.query(SupplierPayment)
        .options(joinedload(SupplierPayment.supplier))
        .filter(
            SupplierPayment.purchase_order_id.is_(None),
            SupplierPayment.status.in_([PaymentStatus.PENDING, PaymentStatus.SCHEDULED]),
            SupplierPayment.due_date.is_not(None),
        )
        .order_by(SupplierPayment.due_date.asc())
        .all()
    )
    for p in standalone:
        ob = Obligation(
            id=f"payment:{p.id}",
            counterparty_name=p.supplier.name,
            total_amount=Decimal(str(p.amount)),
            due_date=p.due_date,
        )
        collected.append((ob, {
            "supplier_id": p.supplier_id,
            "source": "SCHEDULED_PAYMENT",
            "po_number": None,
            "grn_number": None,
            "invoice_number": p.reference_number,
            "invoice_date": None,
            "order_date": None,
            "grn_date": None,
            "payment_due_date": p.due_date,
        }))

    logger.debug("Collected %d payable obligations", len(collected))
    return collected


def load_obligations(db: Session) -> list[Obligation]:
    return [ob for ob, _ in _collect(db)]


def summary_to_dict(summary: AgingSummary) -> dict:
    return {
        "buckets": [
            {
                "key": b.key,
                "label": b.label,
                "amount": format_amount(b.amount),
                "count": b.count,
            }
            for b in summary.buckets
        ],
        "total_pending": format_amount(summary.total_pending),
        "total_overdue": format_amount(summary.total_overdue),
        "overdue_count": summary.overdue_count,
        "distinct_overdue_suppliers": summary.distinct_overdue_counterparties,
        "overdue_percentage": str(summary.overdue_percentage),
    }


def get_aging_summary(db: Session, as_of_date: date) -> dict:
    """Dashboard aging widget data for all unpaid supplier obligations."""
    summary = compute_aging(load_obligations(db), as_of_date)
    result = summary_to_dict(summary)
    result["as_of_date"] = str(as_of_date)
    return result


def _percentage(amount: Decimal, total: Decimal) -> str:
    if total <= ZERO:
        return "0"
    return str((amount / total * 100).quantize(Decimal("0.1")))


def get_supplier_aging(db: Session, as_of_date: date) -> dict:
    """Per-supplier aging report with unpaid document details."""
    by_supplier: dict[UUID, list[tuple[Obligation, dict]]] = defaultdict(list)
    for ob, detail in _collect(db):
        by_supplier[detail["supplier_id"]].append((ob, detail))

    rows = []
    details = []
    grand = {b.key: ZERO for b in PAYABLE_BUCKETS}

    for supplier_id, entries in by_supplier.items():
        summary = compute_aging([ob for ob, _ in entries], as_of_date)
        if summary.total_pending <= ZERO:
            continue
        name = entries[0][0].counterparty_name

        row = {"supplier_id": str(supplier_id), "name": name}
        for b in summary.buckets:
            row[b.key] = format_amount(b.amount)
            grand[b.key] += b.amount
        row["total"] = format_amount(summary.total_pending)
        rows.append(row)

        for ob, detail in entries:
            pending = ob.pending_amount
            if pending <= ZERO:
                continue
            days = days_between(ob.due_date, as_of_date) if ob.due_date else 0
            spec = classify(days) if ob.due_date else PAYABLE_BUCKETS[0]
            details.append({
                "supplier": name,
                "source": detail["source"],
                "po_number": detail["po_number"],
                "grn_number": detail["grn_number"],
                "invoice_number": detail["invoice_number"],
                "invoice_date": _fmt_date(detail["invoice_date"]),
                "order_date": _fmt_date(detail["order_date"]),
                "grn_date": _fmt_date(detail["grn_date"]),
                "due_date": _fmt_date(detail["payment_due_date"]),
                "days_overdue": max(0, days),
                "aging_bucket": spec.label,
                "amount_outstanding": format_amount(pending),
            })

    rows.sort(key=lambda r: r["name"])
    details.sort(key=lambda d: (d["supplier"], -d["days_overdue"]))

    grand_total = sum(grand.values(), ZERO)
    totals = {"name": "Total"}
    for key, amount in grand.items():
        totals[key] = format_amount(amount)
    totals["total"] = format_amount(grand_total)

    return {
        "as_of_date": str(as_of_date),
        "buckets": [
            {
                "key": spec.key,
                "label": spec.label,
                "amount": format_amount(grand[spec.key]),
                "percentage": _percentage(grand[spec.key], grand_total),
            }
            for spec in PAYABLE_BUCKETS
        ],
        "suppliers": rows,
        "totals": totals,
        "details": details,
    }


def _fmt_date(value: date | None) -> str | None:
    return value.isoformat() if value else None
