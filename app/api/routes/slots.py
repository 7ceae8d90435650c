from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_now, get_session
from app.api.schemas.appointment import AvailableSlotsResponse
from app.core.config import settings
from app.scheduling.dates import format_date, format_time, parse_date
from app.scheduling.models import ServiceProvider
from app.scheduling.slots import generate_all_slots
from app.services.slot_service import get_available_slots_for_date, get_provider

router = APIRouter(prefix="/slots", tags=["slots"])


def parse_date_param(value: str) -> date:
    try:
        return parse_date(value)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e


def require_provider(provider_id: str) -> ServiceProvider:
    provider = get_provider(provider_id)
    if provider is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown provider {provider_id!r}",
        )
    return provider


@router.get("/available", response_model=AvailableSlotsResponse)
async def available_slots(
    date_param: str = Query(..., alias="date", description="YYYY-MM-DD or DD/MM/YYYY"),
    provider_id: str = Query(...),
    service_minutes: int | None = Query(None, gt=0),
    session: AsyncSession = Depends(get_session),
    now: datetime = Depends(get_now),
) -> AvailableSlotsResponse:
    """Bookable start times for the barber on that day.

    Clients poll this endpoint; an empty ``slots`` list with ``fully_booked``
    set means no availability, as opposed to an error response.
    """
    d = parse_date_param(date_param)
    provider = require_provider(provider_id)
    slots = await get_available_slots_for_date(session, provider, d, now, service_minutes=service_minutes)
    return AvailableSlotsResponse(
        date=format_date(d),
        provider_id=provider.id,
        slots=[format_time(s) for s in slots],
        all_slots=[format_time(s) for s in generate_all_slots(provider, settings.working_hours)],
        fully_booked=not slots,
    )
