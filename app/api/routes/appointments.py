import logging
from datetime import date, datetime

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_now, get_session
from app.api.routes.slots import require_provider
from app.api.schemas.appointment import BookAppointmentRequest, BookingNotifications, BookingResponse
from app.core.config import settings
from app.models.appointment import Appointment, AppointmentPublic
from app.models.user import User
from app.scheduling.dates import format_time
from app.scheduling.status import status_display
from app.services.appointment_service import (
    cancel_appointment,
    create_appointment,
    list_appointments_for_user,
)
from app.services.catalog import ServiceItem, resolve_services
from app.services.email_service import (
    send_admin_appointment_notification_email,
    send_appointment_confirmation_email,
)
from app.services.notification_service import booking_notifications

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/appointments", tags=["appointments"])

SLOT_TAKEN_DETAIL = "Slot not available: already booked, in the past, or outside working hours."


def to_public(a: Appointment) -> AppointmentPublic:
    display = status_display(a.status)
    return AppointmentPublic(
        **a.model_dump(exclude={"time", "updated_at"}),
        time=format_time(a.time),
        status_label=display.label,
        status_variant=display.variant,
    )


def require_services(service_ids: list[int]) -> list[ServiceItem]:
    services = resolve_services(service_ids)
    if services is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Unknown service id",
        )
    return services


def to_booking_response(appointment: Appointment) -> BookingResponse:
    return BookingResponse(
        appointment=to_public(appointment),
        notifications=BookingNotifications(**booking_notifications(appointment)),
    )


def queue_booking_emails(background_tasks: BackgroundTasks, appointment: Appointment) -> None:
    """Confirmation to the client and a heads-up to the shop; both use sync SMTP."""
    if appointment.email:
        background_tasks.add_task(
            send_appointment_confirmation_email,
            to_email=appointment.email,
            appointment=appointment,
        )
    if settings.from_email:
        background_tasks.add_task(
            send_admin_appointment_notification_email,
            admin_email=settings.from_email,
            appointment=appointment,
        )


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    body: BookAppointmentRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
    now: datetime = Depends(get_now),
) -> BookingResponse:
    provider = require_provider(body.provider_id)
    services = require_services(body.service_ids)
    appointment = await create_appointment(
        session,
        provider,
        body.date,
        body.time,
        now,
        client_name=current_user.full_name,
        services=services,
        user_id=current_user.id,
        phone=body.phone or current_user.phone,
        email=current_user.email,
        payment_method=body.payment_method,
        notes=body.notes,
    )
    if not appointment:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=SLOT_TAKEN_DETAIL)
    queue_booking_emails(background_tasks, appointment)
    return to_booking_response(appointment)


@router.get("", response_model=list[AppointmentPublic])
async def list_my_appointments(
    from_date: date | None = Query(None, alias="from_date"),
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> list[AppointmentPublic]:
    appointments = await list_appointments_for_user(session, current_user.id, from_date=from_date)
    return [to_public(a) for a in appointments]


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_my_appointment(
    appointment_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> None:
    ok = await cancel_appointment(session, appointment_id, current_user.id)
    if not ok:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found or not yours",
        )
