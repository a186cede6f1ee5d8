"""Daily digest tasks for supplier payment reminders and stock expiry."""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.orm import Session

from hospital_admin.app.core.config import settings
from hospital_admin.app.services.expiry import get_expiry_alerts
from hospital_admin.app.services.notification_service import (
    NotificationService,
    NotificationType,
    html_list_items,
)
from hospital_admin.app.services.reminders import get_payment_reminders
from hospital_admin.app.services.supplier_payment import flag_overdue_purchase_orders
from hospital_admin.app.workers.celery_app import celery

logger = logging.getLogger(__name__)


def _reminder_line(entry: dict) -> str:
    ref = entry["reference"] or entry["kind"].replace("_", " ").title()
    return f"{ref} ({entry['supplier']}) due {entry['due_date']}: ₹{entry['amount']}"


def payment_reminder_digest(
    db: Session,
    as_of_date: date,
    recipient: str,
    service: NotificationService | None = None,
) -> dict:
    """Flag past-due orders OVERDUE, then email the overdue and upcoming
    payment lists; returns what was flagged and sent."""
    service = service or NotificationService()
    flagged = flag_overdue_purchase_orders(db, as_of_date)
    reminders = get_payment_reminders(db, as_of_date)
    sent: list[str] = []

    if reminders["overdue"]:
        ok = service.send(
            NotificationType.PAYMENT_OVERDUE,
            recipient,
            count=reminders["overdue_count"],
            total=reminders["total_overdue"],
            as_of_date=as_of_date.isoformat(),
            rows=html_list_items([_reminder_line(e) for e in reminders["overdue"]]),
        )
        if ok:
            sent.append(NotificationType.PAYMENT_OVERDUE.value)

    if reminders["upcoming"]:
        ok = service.send(
            NotificationType.PAYMENT_DUE_SOON,
            recipient,
            count=reminders["upcoming_count"],
            total=reminders["total_upcoming"],
            until=reminders["upcoming"][-1]["due_date"],
            rows=html_list_items([_reminder_line(e) for e in reminders["upcoming"]]),
        )
        if ok:
            sent.append(NotificationType.PAYMENT_DUE_SOON.value)

    return {
        "flagged": flagged,
        "overdue": reminders["overdue_count"],
        "upcoming": reminders["upcoming_count"],
        "sent": sent,
    }


def expiry_digest(
    db: Session,
    as_of_date: date,
    recipient: str,
    service: NotificationService | None = None,
) -> dict:
    service = service or NotificationService()
    alerts = get_expiry_alerts(db, as_of_date)
    sent = False
    if alerts["items"]:
        lines = [
            f"{i['name']} batch {i['batch_no'] or '-'}: expires {i['expiry_date']} "
            f"({i['current_stock']} in stock)"
            for i in alerts["items"]
        ]
        sent = service.send(
            NotificationType.EXPIRY_ALERT,
            recipient,
            count=alerts["total_alerts"],
            as_of_date=as_of_date.isoformat(),
            rows=html_list_items(lines),
        )
    return {"alerts": alerts["total_alerts"], "sent": sent}


@celery.task(name="hospital_admin.app.workers.tasks.reminders.send_payment_reminder_digest")
def send_payment_reminder_digest() -> dict:
    from hospital_admin.app.core.database import SessionLocal

    db = SessionLocal()
    try:
        result = payment_reminder_digest(db, date.today(), settings.REMINDER_RECIPIENT)
        logger.info("Payment reminder digest: %s", result)
        return result
    finally:
        db.close()


@celery.task(name="hospital_admin.app.workers.tasks.reminders.send_expiry_digest")
def send_expiry_digest() -> dict:
    from hospital_admin.app.core.database import SessionLocal

    db = SessionLocal()
    try:
        result = expiry_digest(db, date.today(), settings.REMINDER_RECIPIENT)
        logger.info("Expiry digest: %s", result)
        return result
    finally:
        db.close()
