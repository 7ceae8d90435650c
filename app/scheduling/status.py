from typing import NamedTuple

from app.scheduling.models import AppointmentStatus


class StatusDisplay(NamedTuple):
    label: str
    variant: str


STATUS_DISPLAY: dict[AppointmentStatus, StatusDisplay] = {
    AppointmentStatus.pending: StatusDisplay("Pendiente", "warning"),
    AppointmentStatus.confirmed: StatusDisplay("Confirmado", "success"),
    AppointmentStatus.in_progress: StatusDisplay("En Progreso", "primary"),
    AppointmentStatus.completed: StatusDisplay("Terminado", "info"),
    AppointmentStatus.cancelled: StatusDisplay("Cancelado", "danger"),
}

_REVENUE_STATUSES = frozenset({AppointmentStatus.confirmed, AppointmentStatus.completed})


def status_display(status: AppointmentStatus) -> StatusDisplay:
    return STATUS_DISPLAY[AppointmentStatus(status)]


def occupies_slot(status: AppointmentStatus) -> bool:
    """Only a cancelled appointment frees its slot; completed ones keep it."""
    return AppointmentStatus(status) is not AppointmentStatus.cancelled


def is_revenue_bearing(status: AppointmentStatus) -> bool:
    return AppointmentStatus(status) in _REVENUE_STATUSES
