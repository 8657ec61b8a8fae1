"""
Delivery Adapter - Email Transport for Rendered Reports
Best-effort SMTP delivery that reports its outcome as a DeliveryResult
instead of raising, so callers branch on success explicitly.
"""

import smtplib
import logging
from email.message import EmailMessage
from typing import Optional

from pydantic import BaseModel

from invoice_roi.core.errors import DeliveryFailure
from invoice_roi.core.report import RenderedReport

logger = logging.getLogger("ReportDelivery")
logger.setLevel(logging.INFO)


class DeliveryResult(BaseModel):
    ok: bool
    recipient: str
    error: Optional[str] = None


class EmailDelivery:
    """
    Sends a report by email.

    The HTML document is the message body; a binary artifact, when
    available, is attached.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str = "no-reply@example.com",
        timeout_seconds: float = 15.0
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings) -> Optional["EmailDelivery"]:
        """Build the adapter, or return None when SMTP is not configured."""
        if not settings.smtp_configured:
            logger.info("SMTP not configured; email delivery disabled")
            return None
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASS,
            sender=settings.SMTP_FROM,
            timeout_seconds=settings.SMTP_TIMEOUT_SECONDS
        )

    def build_message(
        self,
        recipient: str,
        subject: str,
        html_body: str,
        attachment: Optional[RenderedReport] = None
    ) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = recipient
        message["Subject"] = subject
        message.set_content("This report is best viewed in an HTML-capable mail client.")
        message.add_alternative(html_body, subtype="html")

        if attachment is not None:
            maintype, _, subtype = attachment.media_type.partition("/")
            message.add_attachment(
                attachment.content,
                maintype=maintype,
                subtype=subtype,
                filename=attachment.filename
            )
        return message

    def _send(self, message: EmailMessage) -> None:
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds) as smtp:
                smtp.ehlo()
                if smtp.has_extn("starttls"):
                    smtp.starttls()
                    smtp.ehlo()
                smtp.login(self.username, self.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryFailure(str(e)) from e

    def deliver(
        self,
        recipient: str,
        subject: str,
        html_body: str,
        attachment: Optional[RenderedReport] = None
    ) -> DeliveryResult:
        """Attempt delivery once. Failures are logged and returned, not raised."""
        message = self.build_message(recipient, subject, html_body, attachment)
        try:
            self._send(message)
        except DeliveryFailure as e:
            logger.error(f"Failed to send report to {recipient}: {e}")
            return DeliveryResult(ok=False, recipient=recipient, error=str(e))

        logger.info(f"Report emailed to {recipient} via {self.host}:{self.port}")
        return DeliveryResult(ok=True, recipient=recipient)
