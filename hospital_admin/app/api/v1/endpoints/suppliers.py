from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hospital_admin.app.core.database import get_db
from hospital_admin.app.models.supplier import PurchaseOrder, Supplier, SupplierPayment
from hospital_admin.app.schemas.supplier import (
    SupplierCreate,
    SupplierOut,
    SupplierPaymentOut,
    SupplierUpdate,
)

router = APIRouter()


@router.get("/", response_model=list[SupplierOut])
def list_suppliers(db: Session = Depends(get_db)) -> list[Supplier]:
    return db.query(Supplier).order_by(Supplier.name).all()


@router.post("/", response_model=SupplierOut, status_code=status.HTTP_201_CREATED)
def create_supplier(
    payload: SupplierCreate,
    db: Session = Depends(get_db),
) -> Supplier:
    if db.query(Supplier).filter(Supplier.name == payload.name).first():
        raise HTTPException(status_code=400, detail="Supplier already exists")
    supplier = Supplier(**payload.model_dump())
    db.add(supplier)
    db.commit()
    db.refresh(supplier)
    return supplier


@router.get("/{supplier_id}", response_model=SupplierOut)
def get_supplier(supplier_id: UUID, db: Session = Depends(get_db)) -> Supplier:
    supplier = db.query(Supplier).filter(Supplier.id == supplier_id).first()
    if not supplier:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return supplier


@router.get("/{supplier_id}/payments", response_model=list[SupplierPaymentOut])
def list_supplier_payments(
    supplier_id: UUID,
    db: Session = Depends(get_db),
) -> list[SupplierPayment]:
    supplier = db.query(Supplier).filter(Supplier.id == supplier_id).first()
    if not supplier:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return (
        db.query(SupplierPayment)
        .filter(SupplierPayment.supplier_id == supplier_id)
        .order_by(SupplierPayment.payment_date.desc())
        .all()
    )


@router.patch("/{supplier_id}", response_model=SupplierOut)
def update_supplier(
    supplier_id: UUID,
    payload: SupplierUpdate,
    db: Session = Depends(get_db),
) -> Supplier:
    supplier = db.query(Supplier).filter(Supplier.id == supplier_id).first()
    if not supplier:
        raise HTTPException(status_code=404, detail="Supplier not found")
    update_data = payload.model_dump(exclude_unset=True)
    if "name" in update_data:
        if update_data["name"] is None:
            raise HTTPException(status_code=400, detail="Supplier name must not be empty")
        clash = (
            db.query(Supplier)
            .filter(Supplier.name == update_data["name"], Supplier.id != supplier_id)
            .first()
        )
        if clash:
            raise HTTPException(status_code=400, detail="Supplier already exists")
    for field, value in update_data.items():
        setattr(supplier, field, value)
    db.commit()
    db.refresh(supplier)
    return supplier


@router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_supplier(supplier_id: UUID, db: Session = Depends(get_db)) -> None:
    supplier = db.query(Supplier).filter(Supplier.id == supplier_id).first()
    if not supplier:
        raise HTTPException(status_code=404, detail="Supplier not found")
    in_use = (
        db.query(PurchaseOrder.id).filter(PurchaseOrder.supplier_id == supplier_id).first()
        or db.query(SupplierPayment.id).filter(SupplierPayment.supplier_id == supplier_id).first()
    )
    if in_use:
        raise HTTPException(
            status_code=400,
            detail="Cannot delete supplier with purchase orders or payments",
        )
    db.delete(supplier)
    db.commit()
