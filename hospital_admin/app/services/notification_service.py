"""Template-based notification service."""

from __future__ import annotations

import logging
from enum import Enum
from html import escape

from hospital_admin.app.services.email_service import EmailService

logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    PAYMENT_OVERDUE = "PAYMENT_OVERDUE"
    PAYMENT_DUE_SOON = "PAYMENT_DUE_SOON"
    EXPIRY_ALERT = "EXPIRY_ALERT"


_TEMPLATES: dict[NotificationType, dict[str, str]] = {
    NotificationType.PAYMENT_OVERDUE: {
        "subject": "Supplier payments overdue: {count} totalling ₹{total}",
        "body": (
            "<h2>Overdue Supplier Payments</h2>"
            "<p><strong>{count}</strong> supplier payment(s) totalling "
            "<strong>₹{total}</strong> are overdue as of {as_of_date}.</p>"
            "<ul>{rows}</ul>"
        ),
    },
    NotificationType.PAYMENT_DUE_SOON: {
        "subject": "Supplier payments due soon: {count} totalling ₹{total}",
        "body": (
            "<h2>Upcoming Supplier Payments</h2>"
            "<p><strong>{count}</strong> supplier payment(s) totalling "
            "<strong>₹{total}</strong> fall due by {until}.</p>"
            "<ul>{rows}</ul>"
        ),
    },
    NotificationType.EXPIRY_ALERT: {
        "subject": "Stock expiry alert: {count} batch(es)",
        "body": (
            "<h2>Stock Expiry Alert</h2>"
            "<p><strong>{count}</strong> stock batch(es) have expired or expire "
            "within 90 days of {as_of_date}.</p>"
            "<ul>{rows}</ul>"
        ),
    },
}


def html_list_items(lines: list[str]) -> str:
    return "".join(f"<li>{escape(line)}</li>" for line in lines)


class NotificationService:
    """Send typed notifications using predefined templates."""

    def __init__(self, email: EmailService | None = None) -> None:
        self._email = email or EmailService()

    def render(self, notification_type: NotificationType, **kwargs: object) -> tuple[str, str]:
        template = _TEMPLATES[notification_type]
        return template["subject"].format(**kwargs), template["body"].format(**kwargs)

    def send(
        self,
        notification_type: NotificationType,
        recipient_email: str,
        **kwargs: object,
    ) -> bool:
        """Render the template for *notification_type* and send via email."""
        if notification_type not in _TEMPLATES:
            logger.error("Unknown notification type: %s", notification_type)
            return False

        subject, body = self.render(notification_type, **kwargs)
        return self._email.send(to=recipient_email, subject=subject, body_html=body)
