"""Shop-side endpoints: agenda, manual bookings, status changes and earnings.

Listing and stats endpoints default to the signed-in admin's own barber; pass
``provider_id`` to look at another one, or ``all`` for the whole shop.
"""
import logging
from datetime import datetime

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_admin, get_now, get_session
from app.api.routes.appointments import (
    SLOT_TAKEN_DETAIL,
    queue_booking_emails,
    require_services,
    to_booking_response,
    to_public,
)
from app.api.routes.slots import parse_date_param, require_provider
from app.api.schemas.appointment import (
    AdminStats,
    AgendaEntry,
    AgendaResponse,
    BookingResponse,
    CurrentAppointmentResponse,
    DayEarnings,
    ManualAppointmentRequest,
    ProviderAgenda,
    StatusUpdateRequest,
    WeeklyEarningsResponse,
)
from app.core.config import settings
from app.models.appointment import AppointmentPublic
from app.models.user import User, UserPublic
from app.scheduling.dates import format_date, format_time
from app.services import stats_service
from app.services.appointment_service import (
    SlotConflictError,
    create_appointment,
    delete_appointment,
    list_appointments,
    search_clients,
    update_appointment_status,
)
from app.services.auth_service import user_to_public
from app.services.slot_service import get_agenda_for_date

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])

ALL_PROVIDERS = "all"


def _scope(admin: User, provider_id: str | None) -> str | None:
    """Which barber a listing covers; None means every barber."""
    if provider_id == ALL_PROVIDERS:
        return None
    if provider_id:
        return require_provider(provider_id).id
    return admin.provider_id


@router.get("/appointments", response_model=list[AppointmentPublic])
async def list_all_appointments(
    provider_id: str | None = Query(None),
    date_param: str | None = Query(None, alias="date"),
    session: AsyncSession = Depends(get_session),
    admin: User = Depends(get_current_admin),
) -> list[AppointmentPublic]:
    d = parse_date_param(date_param) if date_param else None
    appointments = await list_appointments(session, provider_id=_scope(admin, provider_id), d=d)
    return [to_public(a) for a in appointments]


@router.post("/appointments", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_manual_appointment(
    body: ManualAppointmentRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
    admin: User = Depends(get_current_admin),
    now: datetime = Depends(get_now),
) -> BookingResponse:
    """Book on behalf of a client (walk-in or phone). Lands as confirmed."""
    provider = require_provider(body.provider_id)
    services = require_services(body.service_ids)
    appointment = await create_appointment(
        session,
        provider,
        body.date,
        body.time,
        now,
        client_name=body.client_name,
        services=services,
        user_id=body.user_id,
        phone=body.phone,
        email=body.email,
        payment_method=body.payment_method,
        notes=body.notes,
        created_by="admin",
    )
    if not appointment:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=SLOT_TAKEN_DETAIL)
    logger.info("Admin %s booked appointment %s", admin.username, appointment.id)
    queue_booking_emails(background_tasks, appointment)
    return to_booking_response(appointment)


@router.patch("/appointments/{appointment_id}/status", response_model=AppointmentPublic)
async def change_status(
    appointment_id: int,
    body: StatusUpdateRequest,
    session: AsyncSession = Depends(get_session),
    admin: User = Depends(get_current_admin),
) -> AppointmentPublic:
    try:
        appointment = await update_appointment_status(session, appointment_id, body.status)
    except SlotConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    if not appointment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
    logger.info("Admin %s set appointment %s to %s", admin.username, appointment_id, body.status.value)
    return to_public(appointment)


@router.delete("/appointments/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_appointment(
    appointment_id: int,
    session: AsyncSession = Depends(get_session),
    admin: User = Depends(get_current_admin),
) -> None:
    if not await delete_appointment(session, appointment_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")


@router.get("/agenda", response_model=AgendaResponse)
async def day_agenda(
    date_param: str = Query(..., alias="date"),
    provider_id: str | None = Query(None),
    session: AsyncSession = Depends(get_session),
    admin: User = Depends(get_current_admin),
) -> AgendaResponse:
    """Every slot of the day with the appointment that holds it, one agenda per barber.

    Each barber keeps their own slot grid, so the whole-shop view lists them separately.
    """
    d = parse_date_param(date_param)
    scope = _scope(admin, provider_id)
    providers = [require_provider(scope)] if scope else list(settings.providers.values())
    agendas = []
    for provider in providers:
        entries = await get_agenda_for_date(session, provider, d)
        agendas.append(ProviderAgenda(
            provider_id=provider.id,
            provider_name=provider.name,
            entries=[
                AgendaEntry(time=format_time(t), appointment=to_public(a) if a else None)
                for t, a in entries
            ],
        ))
    return AgendaResponse(date=format_date(d), agendas=agendas)


@router.get("/clients", response_model=list[UserPublic])
async def find_clients(
    q: str = Query(..., min_length=1),
    session: AsyncSession = Depends(get_session),
    admin: User = Depends(get_current_admin),
) -> list[UserPublic]:
    return [user_to_public(u) for u in await search_clients(session, q)]


@router.get("/stats", response_model=AdminStats)
async def stats(
    provider_id: str | None = Query(None),
    session: AsyncSession = Depends(get_session),
    admin: User = Depends(get_current_admin),
    now: datetime = Depends(get_now),
) -> AdminStats:
    scope = _scope(admin, provider_id)
    appointments = await list_appointments(session, provider_id=scope)
    return AdminStats(provider_id=scope, **stats_service.admin_stats(appointments, now.date()))


@router.get("/stats/weekly", response_model=WeeklyEarningsResponse)
async def weekly_stats(
    provider_id: str | None = Query(None),
    session: AsyncSession = Depends(get_session),
    admin: User = Depends(get_current_admin),
    now: datetime = Depends(get_now),
) -> WeeklyEarningsResponse:
    appointments = await list_appointments(session, provider_id=_scope(admin, provider_id))
    days = [DayEarnings(**d) for d in stats_service.weekly_earnings(appointments, now.date())]
    return WeeklyEarningsResponse(days=days, total=sum(d.earnings for d in days))


@router.get("/stats/monthly", response_model=dict[str, int])
async def monthly_stats(
    provider_id: str | None = Query(None),
    session: AsyncSession = Depends(get_session),
    admin: User = Depends(get_current_admin),
) -> dict[str, int]:
    appointments = await list_appointments(session, provider_id=_scope(admin, provider_id))
    return stats_service.earnings_by_month(appointments)


@router.get("/current", response_model=CurrentAppointmentResponse)
async def current_appointment(
    provider_id: str | None = Query(None),
    session: AsyncSession = Depends(get_session),
    admin: User = Depends(get_current_admin),
    now: datetime = Depends(get_now),
) -> CurrentAppointmentResponse:
    """What the barber is doing now and who comes next. The dashboard polls this."""
    appointments = await list_appointments(session, provider_id=_scope(admin, provider_id), d=now.date())
    current, following = stats_service.current_and_next(appointments, now)
    return CurrentAppointmentResponse(
        current=to_public(current) if current else None,
        next=to_public(following) if following else None,
    )
