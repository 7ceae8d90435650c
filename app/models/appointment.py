import datetime as dt
from typing import Any

from sqlalchemy import JSON, Column, DateTime, Index, text
from sqlmodel import Field, SQLModel

from app.scheduling.models import AppointmentStatus


def _utc_naive_now() -> dt.datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return dt.datetime.now(dt.UTC).replace(tzinfo=None)


_ACTIVE = text("status != 'cancelled'")


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    # At most one non-cancelled appointment per barber, day and start time
    __table_args__ = (
        Index(
            "uq_appointments_active_slot",
            "provider_id",
            "date",
            "time",
            unique=True,
            sqlite_where=_ACTIVE,
            postgresql_where=_ACTIVE,
        ),
    )

    id: int | None = Field(default=None, primary_key=True)
    user_id: int | None = Field(default=None, foreign_key="users.id", index=True)
    provider_id: str = Field(index=True)
    provider_name: str
    date: dt.date = Field(index=True)
    time: dt.time
    duration_minutes: int | None = None
    status: AppointmentStatus = Field(default=AppointmentStatus.pending)

    client_name: str
    phone: str | None = None
    email: str | None = None
    services: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    total: int = 0
    payment_method: str | None = None
    notes: str | None = None

    deposit_amount: int = 0
    deposit_status: str = "pending"
    confirmation_number: str | None = None
    created_by: str = "client"

    created_at: dt.datetime = Field(default_factory=_utc_naive_now, sa_column=Column(DateTime, nullable=False))
    updated_at: dt.datetime = Field(default_factory=_utc_naive_now, sa_column=Column(DateTime, nullable=False))


class BookingDay(SQLModel, table=True):
    """One row per barber and day. Writers lock it before checking availability,
    so bookings for the same day are decided one at a time.
    """

    __tablename__ = "booking_days"

    provider_id: str = Field(primary_key=True)
    date: dt.date = Field(primary_key=True)
    version: int = 0


class AppointmentPublic(SQLModel):
    id: int
    user_id: int | None = None
    provider_id: str
    provider_name: str
    date: dt.date
    time: str
    duration_minutes: int | None = None
    status: AppointmentStatus
    status_label: str
    status_variant: str
    client_name: str
    phone: str | None = None
    email: str | None = None
    services: list[dict[str, Any]]
    total: int
    payment_method: str | None = None
    notes: str | None = None
    deposit_amount: int
    deposit_status: str
    confirmation_number: str | None = None
    created_by: str
    created_at: dt.datetime
