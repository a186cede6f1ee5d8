from __future__ import annotations

from pydantic import BaseModel


# ─── Aging Summary (dashboard widget) ─────────────────────────────────────────


class AgingBucketOut(BaseModel):
    key: str
    label: str
    amount: str
    count: int


class AgingSummaryResponse(BaseModel):
    as_of_date: str
    buckets: list[AgingBucketOut]
    total_pending: str
    total_overdue: str
    overdue_count: int
    distinct_overdue_suppliers: int
    overdue_percentage: str


# ─── Supplier Aging Report ────────────────────────────────────────────────────


class AgingBucketRow(BaseModel):
    name: str
    current: str  # not yet due
    days_1_30: str
    days_31_60: str
    days_61_90: str
    days_91_120: str
    days_120_plus: str
    total: str


class SupplierAgingRow(AgingBucketRow):
    supplier_id: str


class AgingBucketShare(BaseModel):
    key: str
    label: str
    amount: str
    percentage: str


class AgingDetailRow(BaseModel):
    supplier: str
    source: str
    po_number: str | None
    grn_number: str | None
    invoice_number: str | None
    invoice_date: str | None
    order_date: str | None
    grn_date: str | None
    due_date: str | None
    days_overdue: int
    aging_bucket: str
    amount_outstanding: str


class SupplierAgingResponse(BaseModel):
    as_of_date: str
    buckets: list[AgingBucketShare]
    suppliers: list[SupplierAgingRow]
    totals: AgingBucketRow
    details: list[AgingDetailRow]
