from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, field_validator

from hospital_admin.app.models.supplier import PaymentStatus, POPaymentStatus, POStatus


# ─── Supplier ─────────────────────────────────────────────────────────────────


class SupplierCreate(BaseModel):
    name: str
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    gst_number: str | None = None
    address: str | None = None
    credit_days: int | None = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Supplier name must not be empty")
        return v.strip()

    @field_validator("credit_days")
    @classmethod
    def credit_days_non_negative(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("Credit days must be non-negative")
        return v


class SupplierUpdate(BaseModel):
    name: str | None = None
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    gst_number: str | None = None
    address: str | None = None
    credit_days: int | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Supplier name must not be empty")
        return v.strip() if v is not None else v

    @field_validator("credit_days")
    @classmethod
    def credit_days_non_negative(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("Credit days must be non-negative")
        return v


class SupplierOut(BaseModel):
    id: UUID
    name: str
    contact_person: str | None
    email: str | None
    phone: str | None
    gst_number: str | None
    address: str | None
    credit_days: int | None

    class Config:
        from_attributes = True


# ─── Purchase Order / GRN ─────────────────────────────────────────────────────


class PurchaseOrderCreate(BaseModel):
    supplier_id: UUID
    total_amount: Decimal
    order_date: date | None = None
    expected_delivery: date | None = None
    notes: str | None = None

    @field_validator("total_amount")
    @classmethod
    def amount_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Total amount must be non-negative")
        return v


class GoodsReceiptRequest(BaseModel):
    grn_date: date | None = None
    invoice_number: str | None = None
    invoice_date: date | None = None
    payment_due_date: date | None = None


class PurchaseOrderOut(BaseModel):
    id: UUID
    po_number: str
    supplier_id: UUID
    order_date: date
    expected_delivery: date | None
    status: POStatus
    payment_status: POPaymentStatus
    total_amount: Decimal
    grn_number: str | None
    grn_date: date | None
    invoice_number: str | None
    invoice_date: date | None
    payment_due_date: date | None
    notes: str | None
    created_at: datetime | None

    class Config:
        from_attributes = True


# ─── Supplier Payment ─────────────────────────────────────────────────────────


class SupplierPaymentCreate(BaseModel):
    supplier_id: UUID
    amount: Decimal
    payment_date: date | None = None
    purchase_order_id: UUID | None = None
    due_date: date | None = None
    payment_method: str | None = None
    reference_number: str | None = None
    status: PaymentStatus = PaymentStatus.COMPLETED
    notes: str | None = None

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Amount must be greater than zero")
        return v


class SupplierPaymentUpdate(BaseModel):
    supplier_id: UUID | None = None
    purchase_order_id: UUID | None = None
    amount: Decimal | None = None
    payment_date: date | None = None
    due_date: date | None = None
    payment_method: str | None = None
    reference_number: str | None = None
    status: PaymentStatus | None = None
    notes: str | None = None

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v <= 0:
            raise ValueError("Amount must be greater than zero")
        return v


class SupplierPaymentOut(BaseModel):
    id: UUID
    supplier_id: UUID
    purchase_order_id: UUID | None
    amount: Decimal
    payment_date: date
    due_date: date | None
    payment_method: str | None
    reference_number: str | None
    status: PaymentStatus
    notes: str | None

    class Config:
        from_attributes = True
