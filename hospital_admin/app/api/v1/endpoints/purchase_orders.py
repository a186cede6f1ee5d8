from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hospital_admin.app.core.database import get_db
from hospital_admin.app.models.supplier import PurchaseOrder
from hospital_admin.app.schemas.supplier import (
    GoodsReceiptRequest,
    PurchaseOrderCreate,
    PurchaseOrderOut,
)
from hospital_admin.app.services.purchasing import (
    cancel_purchase_order as _cancel_purchase_order,
    create_purchase_order as _create_purchase_order,
    receive_purchase_order as _receive_purchase_order,
)

router = APIRouter()


@router.get("/", response_model=list[PurchaseOrderOut])
def list_purchase_orders(db: Session = Depends(get_db)) -> list[PurchaseOrder]:
    return (
        db.query(PurchaseOrder)
        .order_by(PurchaseOrder.order_date.desc(), PurchaseOrder.po_number.desc())
        .all()
    )


@router.post("/", response_model=PurchaseOrderOut, status_code=status.HTTP_201_CREATED)
def create_purchase_order(
    payload: PurchaseOrderCreate,
    db: Session = Depends(get_db),
) -> PurchaseOrder:
    try:
        return _create_purchase_order(
            db,
            supplier_id=payload.supplier_id,
            total_amount=payload.total_amount,
            order_date=payload.order_date or date.today(),
            expected_delivery=payload.expected_delivery,
            notes=payload.notes,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/{po_id}", response_model=PurchaseOrderOut)
def get_purchase_order(po_id: UUID, db: Session = Depends(get_db)) -> PurchaseOrder:
    po = db.query(PurchaseOrder).filter(PurchaseOrder.id == po_id).first()
    if not po:
        raise HTTPException(status_code=404, detail="Purchase order not found")
    return po


@router.patch("/{po_id}/receive", response_model=PurchaseOrderOut)
def receive_purchase_order(
    po_id: UUID,
    payload: GoodsReceiptRequest | None = None,
    db: Session = Depends(get_db),
) -> PurchaseOrder:
    """Record the GRN for a pending PO and set its payment due date."""
    payload = payload or GoodsReceiptRequest()
    try:
        return _receive_purchase_order(
            db,
            po_id=po_id,
            grn_date=payload.grn_date or date.today(),
            invoice_number=payload.invoice_number,
            invoice_date=payload.invoice_date,
            payment_due_date=payload.payment_due_date,
        )
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.patch("/{po_id}/cancel", response_model=PurchaseOrderOut)
def cancel_purchase_order(po_id: UUID, db: Session = Depends(get_db)) -> PurchaseOrder:
    try:
        return _cancel_purchase_order(db, po_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
