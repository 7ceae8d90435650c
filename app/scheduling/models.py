import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class ServiceProvider(BaseModel):
    """A barber. The interval is the spacing between bookable start times."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    slot_interval_minutes: int = Field(gt=0)
    description: str = ""


class WorkingHours(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_of_day: dt.time = dt.time(10, 0)
    end_of_day: dt.time = dt.time(20, 0)

    @model_validator(mode="after")
    def _check_window(self) -> "WorkingHours":
        if self.start_of_day >= self.end_of_day:
            raise ValueError("start_of_day must be earlier than end_of_day")
        return self


class AppointmentBooking(BaseModel):
    """Subset of an appointment the slot calculator looks at."""

    model_config = ConfigDict(frozen=True)

    provider_id: str
    date: dt.date
    time: dt.time
    status: AppointmentStatus = AppointmentStatus.pending
    duration_minutes: int | None = None
