"""Slot availability for one barber on one day.

Everything here is pure: the caller supplies the bookings already known for the
(provider, date) pair and the current local time. Nothing reads the clock or the
database, so results are repeatable for identical inputs.
"""
import math
from collections.abc import Iterable
from datetime import date, datetime, time

from app.scheduling.models import AppointmentBooking, ServiceProvider, WorkingHours
from app.scheduling.status import occupies_slot

DEFAULT_SLOT_INTERVAL_MINUTES = 30


def _to_minutes(t: time) -> int:
    return t.hour * 60 + t.minute


def _from_minutes(minutes: int) -> time:
    return time(minutes // 60, minutes % 60)


def slot_interval(provider: ServiceProvider | None) -> int:
    if provider is None:
        return DEFAULT_SLOT_INTERVAL_MINUTES
    return provider.slot_interval_minutes


def generate_all_slots(provider: ServiceProvider | None, hours: WorkingHours) -> list[time]:
    """Start times from the opening time, one interval apart, strictly before closing."""
    interval = slot_interval(provider)
    end = _to_minutes(hours.end_of_day)
    current = _to_minutes(hours.start_of_day)
    slots: list[time] = []
    while current < end:
        slots.append(_from_minutes(current))
        current += interval
    return slots


def is_slot_in_past(day: date, slot: time, now: datetime) -> bool:
    """A slot starting exactly at ``now`` counts as past."""
    return datetime.combine(day, slot) <= now


def slots_held(start: time, duration: int | None, interval: int) -> list[time]:
    """Start time plus every following slot a booking of ``duration`` runs into.

    Without a duration, or one that fits in the interval, only ``start`` is held.
    """
    held = [start]
    if not duration or duration <= interval:
        return held
    first = _to_minutes(start)
    for step in range(1, math.ceil(duration / interval)):
        minutes = first + step * interval
        if minutes >= 24 * 60:
            break
        held.append(_from_minutes(minutes))
    return held


def occupied_slots(
    bookings: Iterable[AppointmentBooking], interval: int
) -> set[time]:
    """Times held by non-cancelled bookings."""
    occupied: set[time] = set()
    for booking in bookings:
        if occupies_slot(booking.status):
            occupied.update(slots_held(booking.time, getattr(booking, "duration_minutes", None), interval))
    return occupied


def compute_available_slots(
    provider: ServiceProvider | None,
    hours: WorkingHours,
    day: date,
    bookings: Iterable[AppointmentBooking],
    now: datetime,
    service_minutes: int | None = None,
) -> list[time]:
    """Bookable start times for ``provider`` on ``day``, in chronological order.

    ``bookings`` must be the bookings for this provider and day. When
    ``service_minutes`` is longer than one interval, a start time is offered only
    if every slot the service would run through is free and inside the window.
    An empty list is a normal answer (fully booked, or the day is over).
    """
    interval = slot_interval(provider)
    all_slots = generate_all_slots(provider, hours)
    occupied = occupied_slots(bookings, interval)
    needed = 1
    if service_minutes and service_minutes > interval:
        needed = math.ceil(service_minutes / interval)

    available: list[time] = []
    for index, slot in enumerate(all_slots):
        if slot in occupied or is_slot_in_past(day, slot, now):
            continue
        if needed > 1:
            run = all_slots[index:index + needed]
            if len(run) < needed or any(s in occupied for s in run):
                continue
        available.append(slot)
    return available
