from datetime import date, datetime, time

from sqlalchemy import DateTime, select

from app.core.config import settings
from app.core.db import async_session_maker
from app.models.appointment import Appointment, BookingDay
from app.models.refresh_token import RefreshToken
from app.scheduling.slots import generate_all_slots
from app.services import appointment_service
from app.services.catalog import get_service

SANTI = settings.providers["santi"]
DAY = date(2026, 3, 11)
NOW = datetime(2026, 3, 10, 14, 32)


async def book(session, slot: time):
    return await appointment_service.create_appointment(
        session, SANTI, DAY, slot, NOW, client_name="Cliente", services=[get_service(1)]
    )


async def test_unique_index_rejects_a_booking_the_availability_check_missed(monkeypatch):
    async with async_session_maker() as session:
        assert await book(session, time(10, 0)) is not None
        await session.commit()

    async def every_slot(session, provider, d, now, service_minutes=None):
        return generate_all_slots(provider, settings.working_hours)

    monkeypatch.setattr(appointment_service, "get_available_slots_for_date", every_slot)
    async with async_session_maker() as session:
        assert await book(session, time(10, 0)) is None
        assert await book(session, time(10, 30)) is not None
        await session.commit()

    async with async_session_maker() as session:
        times = (await session.execute(select(Appointment.time).order_by(Appointment.time))).scalars().all()
    assert times == [time(10, 0), time(10, 30)]


async def test_each_booking_bumps_the_day_row():
    async with async_session_maker() as session:
        await book(session, time(10, 0))
        await book(session, time(11, 0))
        await session.commit()
        day = await session.get(BookingDay, ("santi", DAY))
    assert day.version == 2


def test_timestamps_are_plain_naive_columns():
    for column in (
        Appointment.__table__.c.created_at,
        Appointment.__table__.c.updated_at,
        RefreshToken.__table__.c.expires_at,
    ):
        assert type(column.type) is DateTime
        assert column.type.timezone is False
