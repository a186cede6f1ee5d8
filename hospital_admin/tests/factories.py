"""Row builders shared by the test modules."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from hospital_admin.app.models.supplier import (
    PaymentStatus,
    POPaymentStatus,
    POStatus,
    PurchaseOrder,
    Supplier,
    SupplierPayment,
)

AS_OF = date(2026, 3, 15)


def make_po(
    db: Session,
    supplier: Supplier,
    total: str,
    number: str,
    due_days_ago: int | None = None,
    status: POStatus = POStatus.RECEIVED,
    payment_status: POPaymentStatus = POPaymentStatus.PENDING,
    order_date: date | None = None,
    grn_date: date | None = None,
) -> PurchaseOrder:
    """Purchase order whose payment fell due *due_days_ago* days before AS_OF."""
    po = PurchaseOrder(
        po_number=number,
        supplier_id=supplier.id,
        order_date=order_date or AS_OF - timedelta(days=200),
        grn_date=grn_date,
        status=status,
        payment_status=payment_status,
        total_amount=Decimal(total),
        payment_due_date=(
            AS_OF - timedelta(days=due_days_ago) if due_days_ago is not None else None
        ),
    )
    db.add(po)
    db.flush()
    return po


def make_payment(
    db: Session,
    supplier: Supplier,
    amount: str,
    po: PurchaseOrder | None = None,
    status: PaymentStatus = PaymentStatus.COMPLETED,
    due_date: date | None = None,
    reference: str | None = None,
) -> SupplierPayment:
    p = SupplierPayment(
        supplier_id=supplier.id,
        purchase_order_id=po.id if po else None,
        amount=Decimal(amount),
        payment_date=AS_OF - timedelta(days=1),
        due_date=due_date,
        status=status,
        reference_number=reference,
    )
    db.add(p)
    db.flush()
    return p
