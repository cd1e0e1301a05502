import logging
import smtplib
import ssl
import threading
from dataclasses import dataclass
from email.message import EmailMessage
import html
from typing import Optional

from fastapi import BackgroundTasks

from app.core.config import Settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """El transporte de email falló"""


@dataclass(frozen=True)
class OutgoingEmail:
    to_email: str
    subject: str
    html_body: str
    text_body: Optional[str] = None
    kind: str = "generic"


def render_email_html(
    *,
    app_name: str,
    title: str,
    message_html: str,
    cta_text: str,
    cta_link: str,
    secondary_text: str,
) -> str:
    title_esc = html.escape(title)
    cta_text_esc = html.escape(cta_text)
    cta_link_esc = html.escape(cta_link, quote=True)
    secondary_text_esc = html.escape(secondary_text)

    return f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width,initial-scale=1" />
    <title>{title_esc}</title>
  </head>
  <body style="margin:0; padding:24px; background-color:#f6f6f6; font-family:Arial, Helvetica, sans-serif;">
    <div style="max-width:600px; margin:0 auto; background:#ffffff; border-radius:10px; padding:22px 20px;">
      <div style="font-size:18px; font-weight:700; color:#111111;">{html.escape(app_name)}</div>
      <h1 style="font-size:16px; color:#111111;">{title_esc}</h1>
      <div style="font-size:14px; line-height:20px; color:#333333;">
        {message_html}
      </div>
      <p style="margin-top:18px;">
        <a href="{cta_link_esc}" style="display:inline-block; padding:12px 18px; background:#f06f26; color:#ffffff; border-radius:8px; text-decoration:none; font-weight:700;">{cta_text_esc}</a>
      </p>
      <p style="font-size:12px; color:#777777;">{secondary_text_esc}</p>
      <p style="font-size:12px; color:#777777;">
        If the button does not work, copy this link into your browser:<br />
        <a href="{cta_link_esc}" style="word-break:break-all;">{cta_link_esc}</a>
      </p>
    </div>
  </body>
</html>"""


def build_verification_email(
    *, app_name: str, to_email: str, verification_link: str, expires_in_minutes: int
) -> OutgoingEmail:
    expiry_text = f"This link will expire in {_describe_minutes(expires_in_minutes)}."
    text_body = (
        "Thank you for registering!\n\n"
        f"Verify your email by opening this link: {verification_link}\n\n"
        f"{expiry_text}"
    )
    html_body = render_email_html(
        app_name=app_name,
        title="Verify Your Email",
        message_html="<p style=\"margin:0;\">Thank you for registering! Please verify your email address.</p>",
        cta_text="Verify my email",
        cta_link=verification_link,
        secondary_text=expiry_text,
    )
    return OutgoingEmail(
        to_email=to_email,
        subject="Verify Your Email",
        html_body=html_body,
        text_body=text_body,
        kind="email_verification",
    )


def build_password_reset_email(
    *, app_name: str, to_email: str, reset_link: str, expires_in_minutes: int
) -> OutgoingEmail:
    expiry_text = f"This link will expire in {_describe_minutes(expires_in_minutes)}."
    text_body = (
        "You requested a password reset.\n\n"
        f"Open this link to choose a new password: {reset_link}\n\n"
        f"{expiry_text} If you did not request this, you can ignore this email."
    )
    html_body = render_email_html(
        app_name=app_name,
        title="Password Reset Request",
        message_html="<p style=\"margin:0;\">You requested a password reset.</p>",
        cta_text="Reset password",
        cta_link=reset_link,
        secondary_text=f"{expiry_text} If you did not request this, you can ignore this email.",
    )
    return OutgoingEmail(
        to_email=to_email,
        subject="Password Reset Request",
        html_body=html_body,
        text_body=text_body,
        kind="password_reset",
    )


def _describe_minutes(minutes: int) -> str:
    if minutes % (60 * 24) == 0:
        days = minutes // (60 * 24)
        return f"{days} day" + ("s" if days != 1 else "")
    if minutes % 60 == 0:
        hours = minutes // 60
        return f"{hours} hour" + ("s" if hours != 1 else "")
    return f"{minutes} minutes"


class Mailer:
    """Envía emails transaccionales según `settings.email_backend`"""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _from_header(self) -> Optional[str]:
        if self.settings.smtp_from:
            return self.settings.smtp_from
        if self.settings.smtp_from_email and self.settings.smtp_from_name:
            return f"{self.settings.smtp_from_name} <{self.settings.smtp_from_email}>"
        if self.settings.smtp_from_email:
            return self.settings.smtp_from_email
        return self.settings.smtp_username

    def send(
        self,
        *,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: Optional[str] = None,
    ) -> None:
        backend = self.settings.email_backend
        if backend == "disabled":
            logger.warning("Email deshabilitado; no se envía '%s' a %s", subject, to_email)
            return
        if backend == "console":
            logger.info("Email (console) para %s: %s\n%s", to_email, subject, text_body or html_body)
            return
        if backend != "smtp":
            raise EmailDeliveryError(f"Backend de email desconocido: {backend}")

        from_header = self._from_header()
        if not self.settings.smtp_host or not from_header:
            raise EmailDeliveryError("SMTP mal configurado (host/from)")

        msg = EmailMessage()
        msg["From"] = from_header
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.set_content(text_body or "")
        msg.add_alternative(html_body, subtype="html")

        try:
            if self.settings.smtp_use_ssl:
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(self.settings.smtp_host, self.settings.smtp_port, context=context, timeout=10) as server:
                    self._login(server)
                    server.send_message(msg)
                    return

            with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=10) as server:
                server.ehlo()
                if self.settings.smtp_use_tls:
                    server.starttls(context=ssl.create_default_context())
                    server.ehlo()
                self._login(server)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise EmailDeliveryError(str(e)) from e

    def _login(self, server: smtplib.SMTP) -> None:
        if self.settings.smtp_username and self.settings.smtp_password:
            server.login(self.settings.smtp_username, self.settings.smtp_password)


class DeliveryStats:
    """Contadores de envíos; se exponen en /health"""

    def __init__(self):
        self._lock = threading.Lock()
        self.sent = 0
        self.failed = 0
        self.last_error: Optional[str] = None

    def record_success(self) -> None:
        with self._lock:
            self.sent += 1

    def record_failure(self, error: str) -> None:
        with self._lock:
            self.failed += 1
            self.last_error = error

    def snapshot(self) -> dict:
        with self._lock:
            return {"sent": self.sent, "failed": self.failed, "last_error": self.last_error}


class NotificationDispatcher:
    """
    Punto único de envío de emails.

    Con `background_tasks` el envío se agenda para después de la respuesta;
    sin él (scripts) se entrega en el momento. En ambos casos el resultado
    queda en `DeliveryStats` y en el log, nunca en la respuesta al cliente.
    """

    def __init__(
        self,
        mailer: Mailer,
        stats: DeliveryStats,
        background_tasks: Optional[BackgroundTasks] = None,
    ):
        self.mailer = mailer
        self.stats = stats
        self.background_tasks = background_tasks

    def dispatch(self, email: OutgoingEmail) -> None:
        if self.background_tasks is not None:
            self.background_tasks.add_task(self.deliver, email)
        else:
            self.deliver(email)

    def deliver(self, email: OutgoingEmail) -> bool:
        try:
            self.mailer.send(
                to_email=email.to_email,
                subject=email.subject,
                html_body=email.html_body,
                text_body=email.text_body,
            )
        except Exception as e:
            self.stats.record_failure(f"{email.kind}: {e}")
            logger.exception("No se pudo enviar email '%s' a %s", email.kind, email.to_email)
            return False
        self.stats.record_success()
        logger.info("Email '%s' enviado a %s", email.kind, email.to_email)
        return True
