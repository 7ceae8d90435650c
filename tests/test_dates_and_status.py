from datetime import date, time

import pytest

from app.scheduling.dates import format_date, format_date_display, format_time, parse_date, parse_time
from app.scheduling.models import AppointmentStatus
from app.scheduling.status import STATUS_DISPLAY, is_revenue_bearing, occupies_slot, status_display


class TestDates:

    def test_parse_iso(self):
        assert parse_date("2026-03-11") == date(2026, 3, 11)

    def test_parse_display_format(self):
        assert parse_date("11/03/2026") == date(2026, 3, 11)

    def test_parse_strips_whitespace(self):
        assert parse_date(" 2026-03-11 ") == date(2026, 3, 11)

    @pytest.mark.parametrize("value", ["", "2026/03/11", "31/02/2026", "11-03-2026", "tomorrow"])
    def test_parse_rejects_garbage(self, value):
        with pytest.raises(ValueError):
            parse_date(value)

    def test_formats(self):
        d = date(2026, 1, 5)
        assert format_date(d) == "2026-01-05"
        assert format_date_display(d) == "05/01/2026"

    def test_time_round_trip_format(self):
        assert parse_time("09:05") == time(9, 5)
        assert format_time(time(19, 45)) == "19:45"

    @pytest.mark.parametrize("value", ["25:00", "10:60", "10", "ten"])
    def test_parse_time_rejects_garbage(self, value):
        with pytest.raises(ValueError):
            parse_time(value)


class TestStatus:

    def test_every_status_has_display(self):
        assert set(STATUS_DISPLAY) == set(AppointmentStatus)

    def test_display_values(self):
        assert status_display(AppointmentStatus.completed) == ("Terminado", "info")
        assert status_display("pending").variant == "warning"

    def test_only_cancelled_frees_slot(self):
        assert not occupies_slot(AppointmentStatus.cancelled)
        assert occupies_slot(AppointmentStatus.completed)
        assert occupies_slot("in_progress")

    def test_revenue_statuses(self):
        assert is_revenue_bearing(AppointmentStatus.confirmed)
        assert is_revenue_bearing(AppointmentStatus.completed)
        assert not is_revenue_bearing(AppointmentStatus.pending)
        assert not is_revenue_bearing(AppointmentStatus.cancelled)
