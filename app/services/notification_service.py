"""Messages and links handed to clients and to the shop after a booking.

Nothing here sends anything: the WhatsApp and calendar links are returned to
the caller, which opens them in the browser. Email goes through email_service.
"""
from collections.abc import Iterable
from datetime import datetime, timedelta
from urllib.parse import quote, urlencode

from app.core.config import settings
from app.models.appointment import Appointment
from app.scheduling.dates import format_date_display, format_time
from app.scheduling.models import AppointmentStatus

CALENDAR_TITLE_PREFIX = "Turno en"
DEFAULT_EVENT_MINUTES = 30


def deposit_amount(prices: Iterable[int], percentage: int | None = None) -> int:
    """Deposit owed on the priced services; 'ask in shop' services (price 0) are free of it."""
    pct = settings.deposit_percentage if percentage is None else percentage
    paid = sum(p for p in prices if p > 0)
    return round(paid * pct / 100)


def appointment_start(appointment: Appointment) -> datetime:
    return datetime.combine(appointment.date, appointment.time)


def appointment_end(appointment: Appointment) -> datetime:
    minutes = appointment.duration_minutes or DEFAULT_EVENT_MINUTES
    return appointment_start(appointment) + timedelta(minutes=minutes)


def reminder_time(appointment: Appointment) -> datetime:
    return appointment_start(appointment) - timedelta(hours=settings.reminder_hours_before)


def _event_description(appointment: Appointment) -> str:
    service_names = ", ".join(s.get("name", "") for s in appointment.services)
    minutes = appointment.duration_minutes or DEFAULT_EVENT_MINUTES
    lines = [
        f"{CALENDAR_TITLE_PREFIX} {settings.site_name}",
        "",
        f"Cliente: {appointment.client_name}",
        f"Peluquero: {appointment.provider_name}",
        f"Servicios: {service_names}",
        f"Fecha: {format_date_display(appointment.date)}",
        f"Hora: {format_time(appointment.time)}",
        f"Duración: {minutes} minutos",
        f"Total: ${appointment.total}",
    ]
    if appointment.status == AppointmentStatus.pending:
        lines.append("Estado: PENDIENTE (esperando confirmación de seña)")
    lines += ["", "Recordá presentarte 10 minutos antes."]
    return "\n".join(lines)


def google_calendar_url(appointment: Appointment) -> str:
    fmt = "%Y%m%dT%H%M%S"
    params = {
        "action": "TEMPLATE",
        "text": f"{CALENDAR_TITLE_PREFIX} {settings.site_name}",
        "dates": f"{appointment_start(appointment).strftime(fmt)}/{appointment_end(appointment).strftime(fmt)}",
        "details": _event_description(appointment),
        "location": settings.shop_address,
        "trp": "false",
    }
    return f"https://calendar.google.com/calendar/render?{urlencode(params)}"


def _ics_escape(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def ics_content(appointment: Appointment) -> str:
    """Single-event iCalendar body with an alarm ``reminder_hours_before`` the start."""
    fmt = "%Y%m%dT%H%M%S"
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//barbershop-booking//ES",
        "CALSCALE:GREGORIAN",
        "BEGIN:VEVENT",
        f"UID:{appointment.confirmation_number or appointment.id}@barbershop-booking",
        f"SUMMARY:{_ics_escape(f'{CALENDAR_TITLE_PREFIX} {settings.site_name}')}",
        f"DTSTART:{appointment_start(appointment).strftime(fmt)}",
        f"DTEND:{appointment_end(appointment).strftime(fmt)}",
        f"DESCRIPTION:{_ics_escape(_event_description(appointment))}",
        f"LOCATION:{_ics_escape(settings.shop_address)}",
        "BEGIN:VALARM",
        f"TRIGGER:-PT{settings.reminder_hours_before}H",
        "ACTION:DISPLAY",
        "DESCRIPTION:Recordatorio de turno",
        "END:VALARM",
        "END:VEVENT",
        "END:VCALENDAR",
    ]
    return "\r\n".join(lines)


def whatsapp_url(message: str, phone: str | None = None) -> str:
    target = phone or ""
    return f"https://wa.me/{target}?text={quote(message)}"


def _transfer_block(amount: int) -> str:
    return (
        f"SEÑA REQUERIDA ({settings.deposit_percentage}%): ${amount}\n"
        "Para confirmar tu turno, realizá la transferencia a:\n"
        f"  Alias: {settings.transfer_alias}\n"
        f"  Titular: {settings.transfer_account_holder}\n"
        f"  Entidad: {settings.transfer_bank}\n"
        f"Enviá el comprobante por WhatsApp al {settings.admin_phone}.\n"
        "Tu turno queda PENDIENTE hasta que se confirme el pago."
    )


def client_confirmation_message(appointment: Appointment) -> str:
    service_names = ", ".join(s.get("name", "") for s in appointment.services)
    parts = [
        f"Turno agendado - {settings.site_name}",
        "",
        f"Hola {appointment.client_name}! Tu turno fue agendado:",
        f"Fecha: {format_date_display(appointment.date)} a las {format_time(appointment.time)}",
        f"Con: {appointment.provider_name}",
        f"N° de confirmación: {appointment.confirmation_number}",
        f"Servicios: {service_names}",
        f"Total: ${appointment.total}",
    ]
    if appointment.deposit_amount > 0:
        parts += ["", _transfer_block(appointment.deposit_amount)]
    parts += [
        "",
        f"Dirección: {settings.shop_address}",
        "Presentate 10 minutos antes. Cancelaciones con 12h de anticipación.",
    ]
    return "\n".join(parts)


def admin_notification_message(appointment: Appointment) -> str:
    services = []
    for s in appointment.services:
        price = s.get("price", 0)
        services.append(f"- {s.get('name', '')} - " + (f"${price}" if price > 0 else "(Consultar precio)"))
    deposit = (
        f"Seña requerida: ${appointment.deposit_amount} ({settings.deposit_percentage}%), pendiente de pago"
        if appointment.deposit_amount > 0
        else "Seña: no requiere (servicios a consultar)"
    )
    return "\n".join([
        "NUEVO TURNO SOLICITADO",
        "",
        f"Cliente: {appointment.client_name}",
        f"Peluquero: {appointment.provider_name}",
        f"Fecha: {format_date_display(appointment.date)} a las {format_time(appointment.time)}",
        "Servicios:",
        *services,
        f"Total: ${appointment.total}",
        deposit,
        f"Método de pago: {appointment.payment_method or '-'}",
        f"Notas: {appointment.notes or 'Ninguna'}",
    ])


def booking_notifications(appointment: Appointment) -> dict:
    """Everything the booking screen shows once an appointment is stored."""
    client_message = client_confirmation_message(appointment)
    return {
        "confirmation_message": client_message,
        "client_whatsapp_url": whatsapp_url(client_message),
        "admin_whatsapp_url": whatsapp_url(admin_notification_message(appointment), settings.admin_phone),
        "google_calendar_url": google_calendar_url(appointment),
        "ics": ics_content(appointment),
        "reminder_at": reminder_time(appointment),
    }
