from datetime import date, datetime, time

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.appointment import Appointment, BookingDay
from app.scheduling.models import ServiceProvider
from app.scheduling.slots import compute_available_slots, generate_all_slots, slot_interval, slots_held
from app.scheduling.status import occupies_slot


def get_provider(provider_id: str | None) -> ServiceProvider | None:
    if provider_id is None:
        return None
    return settings.providers.get(provider_id)


async def lock_day(session: AsyncSession, provider_id: str, d: date) -> None:
    """Hold the barber's day until the transaction ends.

    Upserts the (provider_id, date) row: the write keeps the row locked on
    PostgreSQL and takes the database write lock on SQLite, so a second writer
    for the same day waits here and then sees the first one's booking.
    """
    insert = pg_insert if session.bind.dialect.name == "postgresql" else sqlite_insert
    table = BookingDay.__table__
    stmt = insert(table).values(provider_id=provider_id, date=d, version=1)
    stmt = stmt.on_conflict_do_update(
        index_elements=[table.c.provider_id, table.c.date],
        set_={"version": table.c.version + 1},
    )
    await session.execute(stmt)


async def list_bookings(
    session: AsyncSession, provider_id: str, d: date
) -> list[Appointment]:
    """Every stored appointment for the barber on that day, cancelled ones included."""
    result = await session.execute(
        select(Appointment)
        .where(Appointment.provider_id == provider_id, Appointment.date == d)
        .order_by(Appointment.time)
    )
    return list(result.scalars().all())


async def get_available_slots_for_date(
    session: AsyncSession,
    provider: ServiceProvider,
    d: date,
    now: datetime,
    service_minutes: int | None = None,
) -> list[time]:
    bookings = await list_bookings(session, provider.id, d)
    return compute_available_slots(
        provider, settings.working_hours, d, bookings, now, service_minutes=service_minutes
    )


async def get_agenda_for_date(
    session: AsyncSession, provider: ServiceProvider, d: date
) -> list[tuple[time, Appointment | None]]:
    """Every slot of the barber's day paired with the active appointment holding it.

    A long appointment appears on each slot it runs into, not only on its start.
    """
    interval = slot_interval(provider)
    booked: dict[time, Appointment] = {}
    for appointment in await list_bookings(session, provider.id, d):
        if not occupies_slot(appointment.status):
            continue
        for held in slots_held(appointment.time, appointment.duration_minutes, interval):
            booked.setdefault(held, appointment)
    return [(s, booked.get(s)) for s in generate_all_slots(provider, settings.working_hours)]
