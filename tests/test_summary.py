# tests/test_summary.py
"""
Unit tests for hour statistics and weekend-work summaries.
"""

import datetime
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
from clockin.core.finance import summarize_hours, summarize_weekend_work


class TestSummarizeHours:
    def test_empty(self):
        summary = summarize_hours([])

        assert summary.session_count == 0
        assert summary.average_hours_per_day == 0.0

    def test_totals_and_average(self, make_session):
        sessions = [
            make_session(datetime.date(2025, 3, 3), regular=8, exempt=1, total_hours=10, lunch_duration=1),
            make_session(datetime.date(2025, 3, 3), paid=2, hour=20, total_hours=2),
            make_session(datetime.date(2025, 3, 4), regular=6, total_hours=7, lunch_duration=1),
        ]

        summary = summarize_hours(sessions)

        assert summary.total_hours == pytest.approx(19.0)
        assert summary.regular_hours == pytest.approx(14.0)
        assert summary.exempt_hours == pytest.approx(1.0)
        assert summary.paid_overtime_hours == pytest.approx(2.0)
        assert summary.lunch_hours == pytest.approx(2.0)
        assert summary.session_count == 3
        assert summary.sessions_with_lunch == 2
        assert summary.days_worked == 2
        assert summary.average_hours_per_day == pytest.approx(9.5)


class TestWeekendSummary:
    def test_weekend_sessions_only(self, make_session):
        sessions = [
            make_session(datetime.date(2025, 3, 15), regular=8, is_weekend=True, weekend_bonus=100, weekend_days_off=1),
            make_session(
                datetime.date(2025, 3, 16), regular=4, is_weekend=True, weekend_bonus=100, weekend_days_off=0.5
            ),
            make_session(datetime.date(2025, 3, 17), regular=8),
        ]

        summary = summarize_weekend_work(sessions)

        assert summary.weekend_sessions == 2
        assert summary.days_off_earned == pytest.approx(1.5)
        assert summary.weekend_bonus == pytest.approx(200.0)
