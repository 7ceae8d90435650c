from datetime import date, time

from app.models.appointment import Appointment
from app.services import email_service


def make_appointment(**overrides) -> Appointment:
    values = dict(
        provider_id="mili",
        provider_name="Mili",
        date=date(2026, 3, 11),
        time=time(10, 45),
        client_name="Ana <Admin>",
        services=[{"id": 2, "name": "Barba", "price": 7000, "duration": 10}],
        total=7000,
        deposit_amount=3500,
        confirmation_number="CONF-0A1B2C",
    )
    values.update(overrides)
    return Appointment(**values)


def test_confirmation_html():
    html = email_service.build_appointment_confirmation_html(make_appointment())
    assert "Ana &lt;Admin&gt;" in html
    assert "11/03/2026" in html
    assert "10:45" in html
    assert "CONF-0A1B2C" in html
    assert "$3500" in html


def test_confirmation_html_without_deposit():
    html = email_service.build_appointment_confirmation_html(make_appointment(deposit_amount=0))
    assert "Seña requerida" not in html


def test_admin_html_mentions_notes():
    html = email_service.build_admin_notification_html(make_appointment(notes="Llega tarde"))
    assert "Llega tarde" in html
    assert "sin teléfono" in html


def test_send_is_skipped_without_smtp(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("SMTP should not be used")

    monkeypatch.setattr(email_service.smtplib, "SMTP", fail)
    email_service.send_appointment_confirmation_email("ana@example.com", make_appointment())
