import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from app.core.config import settings
from app.models.appointment import Appointment
from app.scheduling.dates import format_date_display, format_time

logger = logging.getLogger(__name__)


def _send_email_sync(to_email: str, subject: str, html_body: str) -> None:
    """Send email via SMTP (blocking). Use from background task."""
    if not settings.email_enabled:
        logger.debug("Email disabled (SMTP not configured), skipping send")
        return
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.from_name} <{settings.from_email}>"
    msg["To"] = to_email
    msg.attach(MIMEText(html_body, "html", "utf-8"))
    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
            server.starttls()
            server.login(settings.smtp_user, settings.smtp_password)
            server.sendmail(settings.from_email, [to_email], msg.as_string())
        logger.info("Email sent to %s", to_email)
    except Exception as e:
        logger.exception("Failed to send email to %s: %s", to_email, e)


def _html_escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _details_rows(appointment: Appointment) -> str:
    services = ", ".join(_html_escape(s.get("name", "")) for s in appointment.services)
    rows = [
        ("Fecha", format_date_display(appointment.date)),
        ("Hora", format_time(appointment.time)),
        ("Peluquero", _html_escape(appointment.provider_name)),
        ("Servicios", services),
        ("Total", f"${appointment.total}"),
    ]
    if appointment.confirmation_number:
        rows.append(("N° de confirmación", appointment.confirmation_number))
    return "".join(
        f'<tr><td style="padding:4px 12px 4px 0;color:#6b7280;">{label}</td>'
        f'<td style="padding:4px 0;font-weight:600;color:#111827;">{value}</td></tr>'
        for label, value in rows
    )


def _wrap(title: str, intro: str, body: str) -> str:
    return f"""
<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{title}</title></head>
<body style="margin:0;padding:24px;font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,sans-serif;background:#f3f4f6;">
  <div style="max-width:560px;margin:0 auto;background:#ffffff;border-radius:12px;padding:32px;">
    <h1 style="margin:0 0 8px 0;font-size:22px;color:#111827;">{title}</h1>
    <p style="margin:0 0 24px 0;color:#6b7280;">{intro}</p>
    {body}
    <p style="margin:24px 0 0 0;font-size:13px;color:#6b7280;">
      {_html_escape(settings.site_name)} &nbsp;·&nbsp; {_html_escape(settings.shop_address)}
    </p>
  </div>
</body>
</html>
"""


def build_appointment_confirmation_html(appointment: Appointment) -> str:
    deposit = ""
    if appointment.deposit_amount > 0:
        deposit = (
            f'<p style="margin:16px 0 0 0;color:#374151;">Seña requerida: <strong>${appointment.deposit_amount}</strong>. '
            f"Transferí al alias <strong>{_html_escape(settings.transfer_alias)}</strong> "
            f"({_html_escape(settings.transfer_account_holder)}, {_html_escape(settings.transfer_bank)}). "
            "Tu turno queda pendiente hasta recibir el comprobante.</p>"
        )
    return _wrap(
        "Turno agendado",
        f"Hola {_html_escape(appointment.client_name) or 'cliente'}, tu turno quedó registrado.",
        f"<table>{_details_rows(appointment)}</table>{deposit}",
    )


def build_admin_notification_html(appointment: Appointment) -> str:
    notes = _html_escape(appointment.notes or "Ninguna")
    return _wrap(
        "Nuevo turno solicitado",
        f"Cliente: {_html_escape(appointment.client_name)} ({_html_escape(appointment.phone or 'sin teléfono')})",
        f"<table>{_details_rows(appointment)}</table>"
        f'<p style="margin:16px 0 0 0;color:#374151;">Notas: {notes}</p>',
    )


def send_appointment_confirmation_email(to_email: str, appointment: Appointment) -> None:
    """Compose and send the client confirmation (call from background task)."""
    subject = f"{settings.site_name} – Turno agendado"
    _send_email_sync(to_email, subject, build_appointment_confirmation_html(appointment))


def send_admin_appointment_notification_email(admin_email: str, appointment: Appointment) -> None:
    subject = f"{settings.site_name} – Nuevo turno {format_date_display(appointment.date)} {format_time(appointment.time)}"
    _send_email_sync(admin_email, subject, build_admin_notification_html(appointment))
