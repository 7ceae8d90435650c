"""Earnings and agenda summaries for the admin dashboard.

All functions take the appointments already loaded and the reference day/time,
so they never touch the database or the clock.
"""
from collections import defaultdict
from collections.abc import Sequence
from datetime import date, datetime, timedelta

from app.models.appointment import Appointment
from app.scheduling.models import AppointmentStatus
from app.scheduling.status import is_revenue_bearing, occupies_slot

WEEKDAY_NAMES = ["Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado", "Domingo"]
# The shop opens Monday to Saturday
WORKING_DAYS_PER_WEEK = 6


def _earning(appointment: Appointment) -> int:
    if is_revenue_bearing(appointment.status) and appointment.total > 0:
        return appointment.total
    return 0


def admin_stats(appointments: Sequence[Appointment], today: date) -> dict:
    total_earnings = sum(_earning(a) for a in appointments)
    monthly_earnings = sum(
        _earning(a)
        for a in appointments
        if a.date.year == today.year and a.date.month == today.month
    )
    return {
        "total_appointments": len(appointments),
        "today_appointments": sum(1 for a in appointments if a.date == today),
        "total_earnings": total_earnings,
        "monthly_earnings": monthly_earnings,
    }


def weekly_earnings(appointments: Sequence[Appointment], today: date) -> list[dict]:
    """Monday to Saturday of the week containing ``today``."""
    monday = today - timedelta(days=today.weekday())
    week = []
    for offset in range(WORKING_DAYS_PER_WEEK):
        day = monday + timedelta(days=offset)
        on_day = [a for a in appointments if a.date == day]
        week.append({
            "date": day,
            "weekday": WEEKDAY_NAMES[day.weekday()],
            "earnings": sum(_earning(a) for a in on_day),
            "appointments": len(on_day),
        })
    return week


def earnings_by_month(appointments: Sequence[Appointment]) -> dict[str, int]:
    totals: dict[str, int] = defaultdict(int)
    for a in appointments:
        totals[a.date.strftime("%Y-%m")] += _earning(a)
    return dict(sorted(totals.items()))


def current_and_next(
    appointments: Sequence[Appointment], now: datetime
) -> tuple[Appointment | None, Appointment | None]:
    """The appointment being served (or the next one due) and the one after it."""
    today = sorted(
        (a for a in appointments if a.date == now.date() and occupies_slot(a.status)),
        key=lambda a: a.time,
    )
    current = next((a for a in today if a.status == AppointmentStatus.in_progress), None)
    if current is None:
        now_time = now.time().replace(second=0, microsecond=0)
        current = next(
            (
                a for a in today
                if a.status in (AppointmentStatus.pending, AppointmentStatus.confirmed)
                and a.time > now_time
            ),
            None,
        )
    if current is None:
        return None, None
    index = next(i for i, a in enumerate(today) if a is current)
    following = today[index + 1] if index + 1 < len(today) else None
    return current, following
