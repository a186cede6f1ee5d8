from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from hospital_admin.app.core.config import settings
from hospital_admin.app.models.supplier import POStatus, PurchaseOrder, Supplier
from hospital_admin.app.services.numbering import (
    GRN_PREFIX,
    PO_PREFIX,
    next_document_number,
)

logger = logging.getLogger(__name__)


def create_purchase_order(
    db: Session,
    supplier_id: UUID,
    total_amount: Decimal,
    order_date: date,
    expected_delivery: date | None = None,
    notes: str | None = None,
) -> PurchaseOrder:
    supplier = db.query(Supplier).filter(Supplier.id == supplier_id).first()
    if not supplier:
        raise ValueError("Supplier not found")
    if total_amount < 0:
        raise ValueError("Total amount must be non-negative")

    po = PurchaseOrder(
        po_number=next_document_number(db, PurchaseOrder.po_number, PO_PREFIX, order_date),
        supplier_id=supplier.id,
        order_date=order_date,
        expected_delivery=expected_delivery,
        total_amount=total_amount,
        notes=notes,
    )
    db.add(po)
    db.commit()
    db.refresh(po)
    logger.info("Created purchase order %s for %s", po.po_number, supplier.name)
    return po


def receive_purchase_order(
    db: Session,
    po_id: UUID,
    grn_date: date,
    invoice_number: str | None = None,
    invoice_date: date | None = None,
    payment_due_date: date | None = None,
) -> PurchaseOrder:
    """Record the goods received note and mark the order RECEIVED.

    Without an explicit due date, payment falls due after the supplier's
    credit days (or the configured default) counted from the invoice date,
    or the GRN date when there is no invoice date.
    """
    po = db.query(PurchaseOrder).filter(PurchaseOrder.id == po_id).first()
    if not po:
        raise LookupError("Purchase order not found")
    if po.status != POStatus.PENDING:
        raise ValueError(f"Cannot receive PO with status {po.status.value}")

    if payment_due_date is None:
        credit_days = po.supplier.credit_days
        if credit_days is None:
            credit_days = settings.DEFAULT_CREDIT_DAYS
        payment_due_date = (invoice_date or grn_date) + timedelta(days=credit_days)

    po.grn_number = next_document_number(db, PurchaseOrder.grn_number, GRN_PREFIX, grn_date)
    po.grn_date = grn_date
    po.invoice_number = invoice_number
    po.invoice_date = invoice_date
    po.payment_due_date = payment_due_date
    po.status = POStatus.RECEIVED

    db.commit()
    db.refresh(po)
    logger.info(
        "Received %s as %s, payment due %s", po.po_number, po.grn_number, po.payment_due_date
    )
    return po


def cancel_purchase_order(db: Session, po_id: UUID) -> PurchaseOrder:
    po = db.query(PurchaseOrder).filter(PurchaseOrder.id == po_id).first()
    if not po:
        raise LookupError("Purchase order not found")
    if po.status != POStatus.PENDING:
        raise ValueError(f"Cannot cancel PO with status {po.status.value}")
    po.status = POStatus.CANCELLED
    db.commit()
    db.refresh(po)
    logger.info("Cancelled purchase order %s", po.po_number)
    return po
