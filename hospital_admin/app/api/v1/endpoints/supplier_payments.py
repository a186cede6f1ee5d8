from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hospital_admin.app.core.database import get_db
from hospital_admin.app.models.supplier import SupplierPayment
from hospital_admin.app.schemas.supplier import (
    SupplierPaymentCreate,
    SupplierPaymentOut,
    SupplierPaymentUpdate,
)
from hospital_admin.app.services.supplier_payment import (
    delete_supplier_payment,
    record_supplier_payment,
    update_supplier_payment,
)

router = APIRouter()


@router.get("/", response_model=list[SupplierPaymentOut])
def list_payments(db: Session = Depends(get_db)) -> list[SupplierPayment]:
    return db.query(SupplierPayment).order_by(SupplierPayment.payment_date.desc()).all()


@router.post("/", response_model=SupplierPaymentOut, status_code=status.HTTP_201_CREATED)
def create_payment(
    payload: SupplierPaymentCreate,
    db: Session = Depends(get_db),
) -> SupplierPayment:
    try:
        return record_supplier_payment(
            db,
            supplier_id=payload.supplier_id,
            amount=payload.amount,
            payment_date=payload.payment_date or date.today(),
            status=payload.status,
            purchase_order_id=payload.purchase_order_id,
            due_date=payload.due_date,
            payment_method=payload.payment_method,
            reference_number=payload.reference_number,
            notes=payload.notes,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.patch("/{payment_id}", response_model=SupplierPaymentOut)
def update_payment(
    payment_id: UUID,
    payload: SupplierPaymentUpdate,
    db: Session = Depends(get_db),
) -> SupplierPayment:
    """Edit a payment; setting status COMPLETED settles it against its order."""
    try:
        return update_supplier_payment(db, payment_id, payload.model_dump(exclude_unset=True))
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payment(payment_id: UUID, db: Session = Depends(get_db)) -> None:
    try:
        delete_supplier_payment(db, payment_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
