"""
Tests for invoice_roi/services/delivery.py

smtplib.SMTP is replaced with an in-memory fake; no network access.
"""

import smtplib

import pytest

from invoice_roi.config.settings import Settings
from invoice_roi.core.report import RenderedReport
from invoice_roi.services.delivery import EmailDelivery


class FakeSMTP:
    """Records what the adapter does with an SMTP connection."""
    instances = []
    fail_login = False
    supports_tls = True

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.started_tls = False
        self.logged_in_as = None
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def ehlo(self):
        pass

    def has_extn(self, name):
        return self.supports_tls and name == "starttls"

    def starttls(self):
        self.started_tls = True

    def login(self, user, password):
        if FakeSMTP.fail_login:
            raise smtplib.SMTPAuthenticationError(535, b"authentication failed")
        self.logged_in_as = user

    def send_message(self, message):
        self.sent.append(message)


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.fail_login = False
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


@pytest.fixture
def delivery():
    return EmailDelivery(
        host="smtp.example.com",
        port=587,
        username="mailer",
        password="secret",
        sender="reports@example.com",
        timeout_seconds=3.0,
    )


def test_successful_delivery(fake_smtp, delivery):
    result = delivery.deliver("cfo@example.com", "ROI Report - Q3", "<h1>hi</h1>")

    assert result.ok is True
    assert result.error is None
    conn = fake_smtp.instances[0]
    assert (conn.host, conn.port, conn.timeout) == ("smtp.example.com", 587, 3.0)
    assert conn.started_tls is True
    assert conn.logged_in_as == "mailer"

    message = conn.sent[0]
    assert message["To"] == "cfo@example.com"
    assert message["From"] == "reports@example.com"
    assert message["Subject"] == "ROI Report - Q3"


def test_pdf_is_attached(fake_smtp, delivery):
    pdf = RenderedReport(content=b"%PDF-1.4 fake", media_type="application/pdf", filename="report-1.pdf")
    delivery.deliver("cfo@example.com", "ROI Report", "<h1>hi</h1>", attachment=pdf)

    message = fake_smtp.instances[0].sent[0]
    attachments = list(message.iter_attachments())
    assert len(attachments) == 1
    assert attachments[0].get_filename() == "report-1.pdf"
    assert attachments[0].get_content() == b"%PDF-1.4 fake"


def test_html_body_is_included(fake_smtp, delivery):
    delivery.deliver("cfo@example.com", "ROI Report", "<h1>Body</h1>")

    message = fake_smtp.instances[0].sent[0]
    html_part = message.get_body(preferencelist=("html",))
    assert "<h1>Body</h1>" in html_part.get_content()


def test_smtp_failure_is_returned_not_raised(fake_smtp, delivery):
    fake_smtp.fail_login = True

    result = delivery.deliver("cfo@example.com", "ROI Report", "<h1>hi</h1>")

    assert result.ok is False
    assert "authentication failed" in result.error
    assert fake_smtp.instances[0].sent == []


def test_connection_error_is_returned_not_raised(monkeypatch, delivery):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("connection refused")

    monkeypatch.setattr(smtplib, "SMTP", refuse)

    result = delivery.deliver("cfo@example.com", "ROI Report", "<h1>hi</h1>")
    assert result.ok is False
    assert "connection refused" in result.error


def test_from_settings_requires_host_user_and_password():
    assert EmailDelivery.from_settings(Settings(SMTP_HOST="smtp.example.com", SMTP_USER="u")) is None


def test_from_settings_builds_adapter():
    adapter = EmailDelivery.from_settings(Settings(
        SMTP_HOST="smtp.example.com",
        SMTP_PORT=2525,
        SMTP_USER="u",
        SMTP_PASS="p",
        SMTP_FROM="roi@example.com",
    ))

    assert adapter.host == "smtp.example.com"
    assert adapter.port == 2525
    assert adapter.sender == "roi@example.com"
