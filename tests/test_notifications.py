import smtplib

import pytest

from intake.services import notification_service
from intake.services.notification_service import (
    render_inquiry_email,
    render_quotation_email,
    send_inquiry_notification,
    send_quotation_notification,
)
from intake.utils import email_sender

INQUIRY = {
    "id": "rec-1",
    "name": "Ada <script>",
    "company": "Analytical Cafe",
    "email": "ada@example.com",
    "message": "Line one\nLine & two",
}

QUOTATION = {
    "id": "rec-2",
    "first_name": "Grace",
    "last_name": "Hopper",
    "email": "grace@navy.example.org",
    "country": "Thailand",
    "company_name": "Compiler Hotel",
    "company_address": "1 Sukhumvit Rd\nBangkok",
    "preferred_solution": "soundtrack-your-brand",
    "number_of_zones": 4,
}


def test_inquiry_email_escapes_html_and_keeps_newlines():
    subject, text, body_html = render_inquiry_email(INQUIRY)

    assert subject == "New Inquiry from Ada <script> - Analytical Cafe"
    assert "Message:\nLine one\nLine & two" in text
    assert "&lt;script&gt;" in body_html
    assert "<script>" not in body_html
    assert "Line one<br>Line &amp; two" in body_html
    assert 'href="mailto:ada@example.com"' in body_html


def test_quotation_email_uses_solution_label():
    subject, text, body_html = render_quotation_email(QUOTATION)

    assert subject == "New Quotation Request from Grace Hopper - Compiler Hotel"
    assert "- Preferred Solution: Soundtrack Your Brand" in text
    assert "- Number of Zones: 4" in text
    assert "Soundtrack Your Brand" in body_html
    assert "1 Sukhumvit Rd<br>Bangkok" in body_html


def test_notification_without_recipient_is_an_error(monkeypatch):
    calls = []
    monkeypatch.setattr(notification_service, "send_email", lambda **kw: calls.append(kw))

    assert send_inquiry_notification(INQUIRY, to_email=None) == (None, "NOTIFICATION_EMAIL not set")
    assert calls == []


def test_quotation_notification_goes_to_staff(monkeypatch):
    sent = []

    def fake_send_email(**kwargs):
        sent.append(kwargs)
        return "smtp", "<id@test>"

    monkeypatch.setattr(notification_service, "send_email", fake_send_email)

    assert send_quotation_notification(QUOTATION, to_email="staff@example.com") == ("smtp", "<id@test>")
    assert sent[0]["to_email"] == "staff@example.com"
    assert sent[0]["subject"].startswith("New Quotation Request from Grace Hopper")
    assert sent[0]["body_html"]


@pytest.fixture
def clean_email_env(monkeypatch):
    for key in (
        "EMAIL_PROVIDER",
        "SMTP_USER",
        "SMTP_PASSWORD",
        "SENDGRID_API_KEY",
        "AWS_REGION",
        "AWS_ACCESS_KEY_ID",
        "FROM_EMAIL",
        "FROM_NAME",
    ):
        monkeypatch.delenv(key, raising=False)


def test_send_email_without_provider_reports_error(clean_email_env):
    provider, detail = email_sender.send_email(to_email="a@b.co", subject="s", body_text="t")
    assert provider is None
    assert "EMAIL_PROVIDER not set" in detail


def test_send_email_unknown_provider(clean_email_env, monkeypatch):
    monkeypatch.setenv("EMAIL_PROVIDER", "pigeon")
    assert email_sender.send_email(to_email="a@b.co", subject="s", body_text="t") == (
        None,
        "Unknown EMAIL_PROVIDER: pigeon",
    )


class FakeSMTP:
    instances = []
    fail_with = None

    def __init__(self, host, port, timeout=None):
        self.host, self.port, self.timeout = host, port, timeout
        self.logged_in = None
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        self.logged_in = (user, password)

    def sendmail(self, from_addr, to_addrs, msg):
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with
        self.sent.append((from_addr, to_addrs, msg))


@pytest.fixture
def fake_smtp(clean_email_env, monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.fail_with = None
    monkeypatch.setattr(email_sender.smtplib, "SMTP", FakeSMTP)
    monkeypatch.setenv("SMTP_USER", "site@example.com")
    monkeypatch.setenv("SMTP_PASSWORD", "app-password")
    return FakeSMTP


def test_smtp_is_picked_when_smtp_user_is_set(fake_smtp):
    provider, msg_id = email_sender.send_email(
        to_email="staff@example.com",
        subject="New Inquiry",
        body_text="plain",
        body_html="<p>html</p>",
    )

    assert provider == "smtp"
    assert msg_id
    server = fake_smtp.instances[0]
    assert (server.host, server.port) == ("smtp.gmail.com", 587)
    assert server.logged_in == ("site@example.com", "app-password")
    from_addr, to_addrs, raw = server.sent[0]
    assert from_addr == "site@example.com"
    assert to_addrs == ["staff@example.com"]
    assert "Subject: New Inquiry" in raw


def test_smtp_failure_is_returned_not_raised(fake_smtp):
    fake_smtp.fail_with = smtplib.SMTPRecipientsRefused({"staff@example.com": (550, b"no")})

    provider, detail = email_sender.send_email(to_email="staff@example.com", subject="s", body_text="t")

    assert provider is None
    assert detail
