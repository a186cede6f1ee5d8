from __future__ import annotations

from pydantic import BaseModel


# ─── Payment Reminders ────────────────────────────────────────────────────────


class ReminderEntry(BaseModel):
    kind: str  # PURCHASE_ORDER or PAYMENT
    id: str
    reference: str | None
    supplier: str
    due_date: str | None
    days_overdue: int
    days_until_due: int
    amount: str


class PaymentRemindersResponse(BaseModel):
    as_of_date: str
    window_days: int
    overdue: list[ReminderEntry]
    upcoming: list[ReminderEntry]
    overdue_count: int
    upcoming_count: int
    total_overdue: str
    total_upcoming: str
    has_reminders: bool


# ─── Expiry Alerts ────────────────────────────────────────────────────────────


class ExpiryAlertItem(BaseModel):
    item_id: int
    name: str
    batch_no: str | None
    category: str | None
    expiry_date: str
    current_stock: int
    days_left: int
    bucket: str


class ExpiryAlertsResponse(BaseModel):
    as_of_date: str
    period: str | None
    counts: dict[str, int]
    total_alerts: int
    items: list[ExpiryAlertItem]
