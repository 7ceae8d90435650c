import logging
from datetime import UTC, date, datetime, time
from uuid import uuid4

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.appointment import Appointment
from app.models.user import User, UserRole
from app.scheduling.models import AppointmentStatus, ServiceProvider
from app.scheduling.slots import occupied_slots, slot_interval, slots_held
from app.scheduling.status import occupies_slot
from app.services.catalog import ServiceItem
from app.services.notification_service import deposit_amount
from app.services.slot_service import get_available_slots_for_date, get_provider, list_bookings, lock_day

logger = logging.getLogger(__name__)


class SlotConflictError(Exception):
    """Another active appointment already holds the barber's slot."""


def _utc_naive_now() -> datetime:
    """Naive UTC for comparison with TIMESTAMP WITHOUT TIME ZONE."""
    return datetime.now(UTC).replace(tzinfo=None)


def _confirmation_number() -> str:
    return f"CONF-{uuid4().hex[:6].upper()}"


async def create_appointment(
    session: AsyncSession,
    provider: ServiceProvider,
    d: date,
    slot: time,
    now: datetime,
    client_name: str,
    services: list[ServiceItem],
    user_id: int | None = None,
    phone: str | None = None,
    email: str | None = None,
    payment_method: str | None = None,
    notes: str | None = None,
    created_by: str = "client",
) -> Appointment | None:
    """Book ``slot`` if it is still available; None when it is not.

    Client bookings start as pending with a deposit due. Bookings made by the
    shop are confirmed straight away. Concurrent bookings for the same barber and
    day wait on the day lock, so each one sees the bookings stored before it.
    """
    duration = sum(s.duration for s in services) or None
    await lock_day(session, provider.id, d)
    available = await get_available_slots_for_date(session, provider, d, now, service_minutes=duration)
    if slot not in available:
        return None

    by_admin = created_by == "admin"
    deposit = 0 if by_admin else deposit_amount(s.price for s in services)
    appointment = Appointment(
        user_id=user_id,
        provider_id=provider.id,
        provider_name=provider.name,
        date=d,
        time=slot,
        duration_minutes=duration,
        status=AppointmentStatus.confirmed if by_admin else AppointmentStatus.pending,
        client_name=client_name,
        phone=phone,
        email=email,
        services=[s.model_dump() for s in services],
        total=sum(s.price for s in services),
        payment_method=payment_method,
        notes=notes,
        deposit_amount=deposit,
        deposit_status="pending" if deposit > 0 else "not_required",
        confirmation_number=_confirmation_number(),
        created_by=created_by,
    )
    session.add(appointment)
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        logger.info("Slot %s %s %s taken concurrently", provider.id, d, slot)
        return None
    await session.refresh(appointment)
    logger.info(
        "Appointment %s booked for %s on %s at %s (%s)",
        appointment.id, provider.id, d, slot, created_by,
    )
    return appointment


async def get_appointment(session: AsyncSession, appointment_id: int) -> Appointment | None:
    result = await session.execute(select(Appointment).where(Appointment.id == appointment_id))
    return result.scalar_one_or_none()


async def list_appointments(
    session: AsyncSession, provider_id: str | None = None, d: date | None = None
) -> list[Appointment]:
    """Newest bookings first."""
    q = select(Appointment).order_by(Appointment.created_at.desc(), Appointment.id.desc())
    if provider_id:
        q = q.where(Appointment.provider_id == provider_id)
    if d:
        q = q.where(Appointment.date == d)
    result = await session.execute(q)
    return list(result.scalars().all())


async def list_appointments_for_user(
    session: AsyncSession, user_id: int, from_date: date | None = None
) -> list[Appointment]:
    q = (
        select(Appointment)
        .where(Appointment.user_id == user_id)
        .order_by(Appointment.date, Appointment.time)
    )
    if from_date:
        q = q.where(Appointment.date >= from_date)
    result = await session.execute(q)
    return list(result.scalars().all())


async def update_appointment_status(
    session: AsyncSession, appointment_id: int, status: AppointmentStatus
) -> Appointment | None:
    """None if the appointment does not exist.

    Raises SlotConflictError when reviving a cancelled appointment whose slots
    have been booked by someone else in the meantime.
    """
    appointment = await get_appointment(session, appointment_id)
    if not appointment:
        return None
    slot = f"{appointment.provider_id} on {appointment.date} at {appointment.time}"
    if occupies_slot(status) and not occupies_slot(appointment.status):
        await lock_day(session, appointment.provider_id, appointment.date)
        interval = slot_interval(get_provider(appointment.provider_id))
        others = [
            b for b in await list_bookings(session, appointment.provider_id, appointment.date)
            if b.id != appointment.id
        ]
        held = set(slots_held(appointment.time, appointment.duration_minutes, interval))
        if held & occupied_slots(others, interval):
            raise SlotConflictError(f"Another appointment already holds {slot}")
    appointment.status = status
    appointment.updated_at = _utc_naive_now()
    session.add(appointment)
    try:
        await session.flush()
    except IntegrityError as e:
        await session.rollback()
        raise SlotConflictError(f"Another appointment already holds {slot}") from e
    await session.refresh(appointment)
    return appointment


async def cancel_appointment(session: AsyncSession, appointment_id: int, user_id: int) -> bool:
    """Clients cancel their own bookings; the row stays so the shop keeps a record."""
    result = await session.execute(
        select(Appointment).where(
            Appointment.id == appointment_id,
            Appointment.user_id == user_id,
        )
    )
    appointment = result.scalar_one_or_none()
    if not appointment:
        return False
    appointment.status = AppointmentStatus.cancelled
    appointment.updated_at = _utc_naive_now()
    session.add(appointment)
    await session.flush()
    return True


async def delete_appointment(session: AsyncSession, appointment_id: int) -> bool:
    appointment = await get_appointment(session, appointment_id)
    if not appointment:
        return False
    await session.delete(appointment)
    await session.flush()
    return True


async def search_clients(session: AsyncSession, term: str) -> list[User]:
    """Clients whose username or document contains ``term``."""
    pattern = f"%{term.lower()}%"
    result = await session.execute(
        select(User)
        .where(
            User.role == UserRole.client,
            or_(func.lower(User.username).like(pattern), User.document.like(f"%{term}%")),
        )
        .order_by(User.username)
    )
    return list(result.scalars().all())
