"""Parsing and formatting of the date/time strings exchanged with clients.

Dates travel as ``YYYY-MM-DD`` (storage, API) or ``DD/MM/YYYY`` (display, and
accepted on input). Times travel as ``HH:MM``. Everything past this module works
on ``date`` and ``time`` values.
"""
from datetime import date, datetime, time

ISO_DATE_FORMAT = "%Y-%m-%d"
DISPLAY_DATE_FORMAT = "%d/%m/%Y"
TIME_FORMAT = "%H:%M"


def parse_date(value: str) -> date:
    value = value.strip()
    for fmt in (ISO_DATE_FORMAT, DISPLAY_DATE_FORMAT):
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date {value!r}; expected YYYY-MM-DD or DD/MM/YYYY")


def format_date(d: date) -> str:
    return d.strftime(ISO_DATE_FORMAT)


def format_date_display(d: date) -> str:
    return d.strftime(DISPLAY_DATE_FORMAT)


def parse_time(value: str) -> time:
    try:
        parsed = datetime.strptime(value.strip(), TIME_FORMAT)
    except ValueError:
        raise ValueError(f"Unrecognised time {value!r}; expected HH:MM") from None
    return parsed.time()


def format_time(t: time) -> str:
    return t.strftime(TIME_FORMAT)
