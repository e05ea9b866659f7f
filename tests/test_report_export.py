# tests/test_report_export.py
"""
Unit tests for the CSV time report.
"""

import csv
import datetime
import io
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
from clockin.core.models import DateRange, Granularity, WorkSession
from clockin.core.report_export import REPORT_TITLE, SESSION_COLUMNS, build_time_report_csv, report_filename
from clockin.core.time_utils import end_of_day, start_of_day

MARCH = DateRange(start=start_of_day(datetime.date(2025, 3, 1)), end=end_of_day(datetime.date(2025, 3, 31)))
GENERATED = datetime.datetime(2025, 4, 1, 10, 0)


@pytest.fixture
def report_sessions():
    return [
        WorkSession(
            clock_in="2025-03-12T08:00:00",
            clock_out="2025-03-12T19:00:00",
            lunch_duration=1,
            regular_hours=8,
            exempt_overtime_hours=1.5,
            paid_overtime_hours=0.5,
        ),
        WorkSession(
            clock_in="2025-03-10T09:00:00",
            clock_out="2025-03-10T18:00:00",
            lunch_duration=1,
            regular_hours=8,
        ),
        WorkSession(clock_in="2025-03-12T20:00:00", total_hours=2, paid_overtime_hours=2),
        WorkSession(clock_in="2025-04-02T09:00:00", clock_out="2025-04-02T17:00:00", regular_hours=8),
    ]


def read_rows(content: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(content)))


class TestTimeReport:
    def test_header_block(self, report_sessions):
        rows = read_rows(build_time_report_csv(report_sessions, MARCH, Granularity.MONTHLY, generated_at=GENERATED))

        assert rows[0] == [REPORT_TITLE]
        assert rows[1] == ["Period: Mar 01, 2025 - Mar 31, 2025"]
        assert rows[2] == ["Report Type: Monthly"]
        assert rows[3] == ["Generated: 2025-04-01 10:00:00"]
        assert rows[4] == []
        assert rows[5] == list(SESSION_COLUMNS)

    def test_session_rows_in_clock_in_order(self, report_sessions):
        rows = read_rows(build_time_report_csv(report_sessions, MARCH, "monthly", generated_at=GENERATED))

        session_rows = rows[6:9]
        assert session_rows[0] == ["2025-03-10", "09:00:00", "18:00:00", "9.00", "1.00", "8.00", "0.00", "0.00"]
        assert session_rows[1] == ["2025-03-12", "08:00:00", "19:00:00", "11.00", "1.00", "8.00", "1.50", "0.50"]
        assert session_rows[2][:3] == ["2025-03-12", "20:00:00", ""], "open session has a blank clock out"
        assert rows[9] == []

    def test_summary_block(self, report_sessions):
        rows = read_rows(build_time_report_csv(report_sessions, MARCH, "monthly", generated_at=GENERATED))

        summary = {row[0]: row[1] for row in rows[11:]}
        assert rows[10] == ["Summary"]
        assert summary["Total Sessions"] == "3"
        assert summary["Total Days Worked"] == "2"
        assert summary["Total Hours"] == "22.00"
        assert summary["Lunch Hours"] == "2.00"
        assert summary["Regular Hours"] == "16.00"
        assert summary["Isenção Hours (Unpaid)"] == "1.50"
        assert summary["Overwork Hours (Paid)"] == "2.50"

    def test_empty_window(self):
        rows = read_rows(build_time_report_csv([], MARCH, Granularity.WEEKLY, generated_at=GENERATED))

        assert rows[2] == ["Report Type: Weekly"]
        assert rows[6] == []
        assert ["Total Sessions", "0"] in rows


class TestReportFilename:
    def test_filename(self):
        assert report_filename(Granularity.YEARLY, GENERATED) == "clock-report-yearly-2025-04-01.csv"
        assert report_filename("daily", GENERATED) == "clock-report-daily-2025-04-01.csv"
