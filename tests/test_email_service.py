import logging
import smtplib

import pytest

from app.core.config import Settings
from app.services.email_service import (
    DeliveryStats,
    EmailDeliveryError,
    Mailer,
    NotificationDispatcher,
    OutgoingEmail,
    build_password_reset_email,
    build_verification_email,
    render_email_html,
)


def _email(**overrides):
    values = {"to_email": "ann@x.com", "subject": "Hi", "html_body": "<p>hi</p>", "text_body": "hi"}
    values.update(overrides)
    return OutgoingEmail(**values)


def test_mail_failure_does_not_change_register_response(client, mailer):
    mailer.fail = True

    res = client.post("/api/auth/register", json={"name": "Ann", "email": "ann@x.com", "password": "pw123"})
    assert res.status_code == 201
    assert len(mailer.sent) == 1

    health = client.get("/health").json()
    assert health["email"]["failed"] == 1
    assert health["email"]["sent"] == 0
    assert "SMTP caído" in health["email"]["last_error"]


def test_successful_sends_are_counted(client, mailer):
    client.post("/api/auth/register", json={"name": "Ann", "email": "ann@x.com", "password": "pw123"})

    health = client.get("/health").json()
    assert health["status"] == "healthy"
    assert health["email"] == {"sent": 1, "failed": 0, "last_error": None}


def test_dispatcher_delivers_inline_without_background_tasks():
    sent = []

    class _Mailer:
        def send(self, **kwargs):
            sent.append(kwargs)

    stats = DeliveryStats()
    NotificationDispatcher(_Mailer(), stats).dispatch(_email())

    assert len(sent) == 1
    assert stats.snapshot()["sent"] == 1


def test_dispatcher_records_failures(caplog):
    class _Broken:
        def send(self, **kwargs):
            raise EmailDeliveryError("boom")

    stats = DeliveryStats()
    with caplog.at_level(logging.ERROR):
        delivered = NotificationDispatcher(_Broken(), stats).deliver(_email(kind="password_reset"))

    assert delivered is False
    assert stats.snapshot() == {"sent": 0, "failed": 1, "last_error": "password_reset: boom"}
    assert "password_reset" in caplog.text


def test_mailer_disabled_and_console_backends_do_not_touch_smtp(monkeypatch):
    def _no_smtp(*args, **kwargs):
        raise AssertionError("no debería abrir conexión SMTP")

    monkeypatch.setattr(smtplib, "SMTP", _no_smtp)
    Mailer(Settings(email_backend="disabled")).send(to_email="a@x.com", subject="s", html_body="h")
    Mailer(Settings(email_backend="console")).send(to_email="a@x.com", subject="s", html_body="h")


def test_mailer_reports_misconfiguration():
    with pytest.raises(EmailDeliveryError):
        Mailer(Settings(email_backend="smtp", smtp_host=None)).send(to_email="a@x.com", subject="s", html_body="h")
    with pytest.raises(EmailDeliveryError):
        Mailer(Settings(email_backend="carrier-pigeon")).send(to_email="a@x.com", subject="s", html_body="h")


def test_mailer_smtp_sends_message(monkeypatch):
    calls = {}

    class _FakeSMTP:
        def __init__(self, host, port, timeout=None):
            calls["host"] = (host, port)

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def ehlo(self):
            pass

        def starttls(self, context=None):
            calls["starttls"] = True

        def login(self, username, password):
            calls["login"] = username

        def send_message(self, msg):
            calls["to"] = msg["To"]
            calls["from"] = msg["From"]

    monkeypatch.setattr(smtplib, "SMTP", _FakeSMTP)
    settings = Settings(
        email_backend="smtp",
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_username="mailer",
        smtp_password="secret",
        smtp_from_email="shop@example.com",
        smtp_from_name="Shop",
    )
    Mailer(settings).send(to_email="ann@x.com", subject="Hi", html_body="<p>hi</p>", text_body="hi")

    assert calls == {
        "host": ("smtp.example.com", 587),
        "starttls": True,
        "login": "mailer",
        "to": "ann@x.com",
        "from": "Shop <shop@example.com>",
    }


def test_mailer_wraps_transport_errors(monkeypatch):
    def _refused(*args, **kwargs):
        raise ConnectionRefusedError("refused")

    monkeypatch.setattr(smtplib, "SMTP", _refused)
    mailer = Mailer(Settings(email_backend="smtp", smtp_host="smtp.example.com", smtp_from="shop@example.com"))
    with pytest.raises(EmailDeliveryError):
        mailer.send(to_email="ann@x.com", subject="Hi", html_body="<p>hi</p>")


def test_templates_escape_links_and_describe_expiry():
    body = render_email_html(
        app_name="Shop",
        title="<Title>",
        message_html="<p>ok</p>",
        cta_text="Go",
        cta_link="http://x.test/?a=1&b=2",
        secondary_text="soon",
    )
    assert "&lt;Title&gt;" in body
    assert "a=1&amp;b=2" in body

    verification = build_verification_email(
        app_name="Shop", to_email="a@x.com", verification_link="http://x.test/v", expires_in_minutes=60
    )
    assert "1 hour" in verification.text_body
    assert verification.kind == "email_verification"

    reset = build_password_reset_email(
        app_name="Shop", to_email="a@x.com", reset_link="http://x.test/r", expires_in_minutes=30
    )
    assert "30 minutes" in reset.text_body
    assert reset.subject == "Password Reset Request"
