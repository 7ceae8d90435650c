import datetime as dt
from typing import Any

from pydantic import BaseModel, Field, field_validator

from app.models.appointment import AppointmentPublic
from app.scheduling.dates import parse_date, parse_time
from app.scheduling.models import AppointmentStatus


class ProviderInfo(BaseModel):
    id: str
    name: str
    slot_interval_minutes: int
    description: str


class AvailableSlotsResponse(BaseModel):
    date: str  # YYYY-MM-DD
    provider_id: str
    slots: list[str]  # HH:MM
    all_slots: list[str]
    fully_booked: bool


class AgendaEntry(BaseModel):
    time: str
    # the appointment holding this slot; a long one shows on every slot it covers
    appointment: AppointmentPublic | None = None


class ProviderAgenda(BaseModel):
    provider_id: str
    provider_name: str
    entries: list[AgendaEntry]


class AgendaResponse(BaseModel):
    date: str
    agendas: list[ProviderAgenda]


class _BookingFields(BaseModel):
    provider_id: str
    date: dt.date
    time: dt.time
    service_ids: list[int] = Field(min_length=1)
    payment_method: str | None = None
    notes: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, v: Any) -> Any:
        return parse_date(v) if isinstance(v, str) else v

    @field_validator("time", mode="before")
    @classmethod
    def _parse_time(cls, v: Any) -> Any:
        return parse_time(v) if isinstance(v, str) else v


class BookAppointmentRequest(_BookingFields):
    phone: str | None = None


class ManualAppointmentRequest(_BookingFields):
    client_name: str = Field(min_length=1)
    user_id: int | None = None
    phone: str | None = None
    email: str | None = None


class BookingNotifications(BaseModel):
    confirmation_message: str
    client_whatsapp_url: str
    admin_whatsapp_url: str
    google_calendar_url: str
    ics: str
    reminder_at: dt.datetime


class BookingResponse(BaseModel):
    appointment: AppointmentPublic
    notifications: BookingNotifications


class StatusUpdateRequest(BaseModel):
    status: AppointmentStatus


class AdminStats(BaseModel):
    provider_id: str | None
    total_appointments: int
    today_appointments: int
    total_earnings: int
    monthly_earnings: int


class DayEarnings(BaseModel):
    date: dt.date
    weekday: str
    earnings: int
    appointments: int


class WeeklyEarningsResponse(BaseModel):
    days: list[DayEarnings]
    total: int


class CurrentAppointmentResponse(BaseModel):
    current: AppointmentPublic | None = None
    next: AppointmentPublic | None = None
