from datetime import date, datetime, time
from urllib.parse import parse_qs, urlparse

from app.models.appointment import Appointment
from app.scheduling.models import AppointmentStatus
from app.services.notification_service import (
    admin_notification_message,
    booking_notifications,
    client_confirmation_message,
    deposit_amount,
    google_calendar_url,
    ics_content,
    reminder_time,
)


def make_appointment(**overrides) -> Appointment:
    values = dict(
        id=7,
        provider_id="santi",
        provider_name="Santuu",
        date=date(2026, 3, 11),
        time=time(15, 30),
        duration_minutes=25,
        status=AppointmentStatus.pending,
        client_name="Juan Pérez",
        services=[{"id": 3, "name": "Corte + Barba", "price": 18500, "duration": 25}],
        total=18500,
        deposit_amount=9250,
        confirmation_number="CONF-ABC123",
    )
    values.update(overrides)
    return Appointment(**values)


def test_deposit_is_half_of_priced_services():
    assert deposit_amount([15500, 7000]) == 11250
    assert deposit_amount([15500, 0]) == 7750
    assert deposit_amount([0, 0]) == 0
    assert deposit_amount([7001], percentage=50) == 3500


def test_reminder_two_hours_before():
    assert reminder_time(make_appointment()) == datetime(2026, 3, 11, 13, 30)


def test_google_calendar_url():
    url = urlparse(google_calendar_url(make_appointment()))
    params = parse_qs(url.query)
    assert url.netloc == "calendar.google.com"
    assert params["dates"] == ["20260311T153000/20260311T155500"]
    assert "Juan Pérez" in params["details"][0]
    assert "PENDIENTE" in params["details"][0]


def test_ics_content():
    ics = ics_content(make_appointment())
    lines = ics.split("\r\n")
    assert lines[0] == "BEGIN:VCALENDAR"
    assert lines[-1] == "END:VCALENDAR"
    assert "DTSTART:20260311T153000" in lines
    assert "DTEND:20260311T155500" in lines
    assert "TRIGGER:-PT2H" in lines
    assert "UID:CONF-ABC123@barbershop-booking" in lines


def test_ics_defaults_to_thirty_minutes():
    ics = ics_content(make_appointment(duration_minutes=None))
    assert "DTEND:20260311T160000" in ics.split("\r\n")


def test_client_message_mentions_deposit_and_transfer():
    message = client_confirmation_message(make_appointment())
    assert "11/03/2026 a las 15:30" in message
    assert "$9250" in message
    assert "TURNO.STYLE" in message


def test_client_message_without_deposit():
    message = client_confirmation_message(make_appointment(deposit_amount=0))
    assert "TURNO.STYLE" not in message


def test_admin_message_flags_ask_in_shop_services():
    appointment = make_appointment(
        services=[{"id": 4, "name": "Global / Color (Consultar)", "price": 0, "duration": 90}],
        total=0,
        deposit_amount=0,
    )
    message = admin_notification_message(appointment)
    assert "(Consultar precio)" in message
    assert "no requiere" in message


def test_booking_notifications_bundle():
    bundle = booking_notifications(make_appointment())
    assert bundle["admin_whatsapp_url"].startswith("https://wa.me/2233540664?text=")
    assert bundle["client_whatsapp_url"].startswith("https://wa.me/?text=")
    assert bundle["reminder_at"] == datetime(2026, 3, 11, 13, 30)
