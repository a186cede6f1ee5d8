from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from hospital_admin.app.models.supplier import (
    PaymentStatus,
    POPaymentStatus,
    POStatus,
    PurchaseOrder,
    Supplier,
    SupplierPayment,
)
from hospital_admin.app.services.payables import paid_amount_for_po

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def refresh_po_payment_status(db: Session, po: PurchaseOrder) -> POPaymentStatus:
    """Derive the order's payment status from its completed payments."""
    paid = paid_amount_for_po(db, po.id)
    if paid >= Decimal(str(po.total_amount)):
        po.payment_status = POPaymentStatus.PAID
    elif paid > ZERO:
        po.payment_status = POPaymentStatus.PARTIAL
    elif po.payment_status != POPaymentStatus.OVERDUE:
        po.payment_status = POPaymentStatus.PENDING
    return po.payment_status


def record_supplier_payment(
    db: Session,
    supplier_id: UUID,
    amount: Decimal,
    payment_date: date,
    status: PaymentStatus = PaymentStatus.COMPLETED,
    purchase_order_id: UUID | None = None,
    due_date: date | None = None,
    payment_method: str | None = None,
    reference_number: str | None = None,
    notes: str | None = None,
) -> SupplierPayment:
    """Record a payment (or a scheduled one) against a supplier."""
    supplier = db.query(Supplier).filter(Supplier.id == supplier_id).first()
    if not supplier:
        raise ValueError("Supplier not found")

    if amount <= 0:
        raise ValueError("Payment amount must be greater than zero")

    po = None
    if purchase_order_id is not None:
        po = db.query(PurchaseOrder).filter(PurchaseOrder.id == purchase_order_id).first()
        if not po:
            raise ValueError("Purchase order not found")
        if po.supplier_id != supplier.id:
            raise ValueError("Purchase order belongs to a different supplier")

    payment = SupplierPayment(
        supplier_id=supplier.id,
        purchase_order_id=purchase_order_id,
        amount=amount,
        payment_date=payment_date,
        due_date=due_date,
        payment_method=payment_method,
        reference_number=reference_number,
        status=status,
        notes=notes,
    )
    db.add(payment)
    db.flush()

    if po is not None:
        refresh_po_payment_status(db, po)

    db.commit()
    db.refresh(payment)
    logger.info(
        "Recorded %s payment of %s to %s", payment.status.value, amount, supplier.name
    )
    return payment


def _get_payment(db: Session, payment_id: UUID) -> SupplierPayment:
    payment = db.query(SupplierPayment).filter(SupplierPayment.id == payment_id).first()
    if not payment:
        raise LookupError("Payment not found")
    return payment


def _refresh_linked(db: Session, po_ids: set[UUID | None]) -> None:
    for po_id in po_ids:
        if po_id is None:
            continue
        po = db.query(PurchaseOrder).filter(PurchaseOrder.id == po_id).first()
        if po is not None:
            refresh_po_payment_status(db, po)


def update_supplier_payment(
    db: Session,
    payment_id: UUID,
    changes: dict,
) -> SupplierPayment:
    """Apply *changes* (field -> value) to a payment.

    Typical use is settling a scheduled payment (status COMPLETED) or
    cancelling it. The payment status of the order it was linked to before
    and after the change is recomputed.
    """
    payment = _get_payment(db, payment_id)
    old_po_id = payment.purchase_order_id

    for required in ("supplier_id", "amount", "payment_date", "status"):
        if required in changes and changes[required] is None:
            raise ValueError(f"{required} cannot be cleared")
    if "amount" in changes and changes["amount"] <= 0:
        raise ValueError("Payment amount must be greater than zero")

    supplier_id = changes.get("supplier_id", payment.supplier_id)
    if "supplier_id" in changes:
        if not db.query(Supplier).filter(Supplier.id == supplier_id).first():
            raise ValueError("Supplier not found")

    po_id = changes.get("purchase_order_id", old_po_id)
    if po_id is not None and ("purchase_order_id" in changes or "supplier_id" in changes):
        po = db.query(PurchaseOrder).filter(PurchaseOrder.id == po_id).first()
        if not po:
            raise ValueError("Purchase order not found")
        if po.supplier_id != supplier_id:
            raise ValueError("Purchase order belongs to a different supplier")

    for field, value in changes.items():
        setattr(payment, field, value)
    db.flush()

    _refresh_linked(db, {old_po_id, payment.purchase_order_id})

    db.commit()
    db.refresh(payment)
    logger.info("Updated payment %s: %s", payment.id, ", ".join(sorted(changes)))
    return payment


def delete_supplier_payment(db: Session, payment_id: UUID) -> None:
    payment = _get_payment(db, payment_id)
    po_id = payment.purchase_order_id
    db.delete(payment)
    db.flush()

    _refresh_linked(db, {po_id})

    db.commit()
    logger.info("Deleted payment %s", payment_id)


def flag_overdue_purchase_orders(db: Session, as_of_date: date) -> int:
    """Mark received, unpaid orders past their due date as OVERDUE.

    Run daily before the reminder digest. A later payment resets the flag
    through :func:`refresh_po_payment_status`.
    """
    pos = (
        db.query(PurchaseOrder)
        .filter(
            PurchaseOrder.status == POStatus.RECEIVED,
            PurchaseOrder.payment_status.in_(
                [POPaymentStatus.PENDING, POPaymentStatus.PARTIAL]
            ),
            PurchaseOrder.payment_due_date.is_not(None),
            PurchaseOrder.payment_due_date < as_of_date,
        )
        .all()
    )
    for po in pos:
        po.payment_status = POPaymentStatus.OVERDUE
    db.commit()
    if pos:
        logger.info("Flagged %d purchase order(s) overdue as of %s", len(pos), as_of_date)
    return len(pos)
