"""SMTP delivery for digest emails."""

from __future__ import annotations

import logging
import re
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from hospital_admin.app.core.config import settings

logger = logging.getLogger(__name__)

_TAG = re.compile(r"<[^>]+>")


def split_recipients(value: str) -> list[str]:
    """``"a@x, b@y"`` -> ``["a@x", "b@y"]``; blanks are dropped."""
    return [part.strip() for part in value.split(",") if part.strip()]


def html_to_text(body_html: str) -> str:
    text = body_html.replace("</li>", "\n").replace("</p>", "\n").replace("</h2>", "\n")
    return _TAG.sub("", text).strip()


class EmailService:
    """Send HTML mail with a plain-text fallback.

    Connection details default to the SMTP_* settings; delivery is skipped
    entirely unless NOTIFICATION_ENABLED is set.
    """

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        username: str | None = None,
        password: str | None = None,
        enabled: bool | None = None,
    ) -> None:
        self.host = host or settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT
        self.username = settings.SMTP_USERNAME if username is None else username
        self.password = settings.SMTP_PASSWORD if password is None else password
        self.enabled = settings.NOTIFICATION_ENABLED if enabled is None else enabled

    def _build(self, recipients: list[str], subject: str, body_html: str, sender: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = sender
        msg["To"] = ", ".join(recipients)
        msg.attach(MIMEText(html_to_text(body_html), "plain", "utf-8"))
        msg.attach(MIMEText(body_html, "html", "utf-8"))
        return msg

    def send(
        self,
        to: str,
        subject: str,
        body_html: str,
        from_addr: str | None = None,
    ) -> bool:
        """Send to one address or a comma-separated list. Returns ``True`` on success."""
        if not self.enabled:
            logger.info("Notifications disabled, skipping %r", subject)
            return False
        recipients = split_recipients(to or "")
        if not recipients:
            logger.warning("No recipient configured, skipping %r", subject)
            return False

        sender = from_addr or self.username
        msg = self._build(recipients, subject, body_html, sender)
        try:
            with smtplib.SMTP(self.host, self.port) as server:
                if self.port != 25:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password)
                server.sendmail(sender, recipients, msg.as_string())
        except (smtplib.SMTPException, OSError):
            logger.exception("Failed to send %r to %s", subject, ", ".join(recipients))
            return False
        logger.info("Sent %r to %d recipient(s)", subject, len(recipients))
        return True
