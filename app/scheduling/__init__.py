from app.scheduling.models import (
    AppointmentBooking,
    AppointmentStatus,
    ServiceProvider,
    WorkingHours,
)
from app.scheduling.slots import (
    compute_available_slots,
    generate_all_slots,
    is_slot_in_past,
    occupied_slots,
    slot_interval,
    slots_held,
)

__all__ = [
    "AppointmentBooking",
    "AppointmentStatus",
    "ServiceProvider",
    "WorkingHours",
    "compute_available_slots",
    "generate_all_slots",
    "is_slot_in_past",
    "occupied_slots",
    "slot_interval",
    "slots_held",
]
