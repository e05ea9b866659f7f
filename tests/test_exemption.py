# tests/test_exemption.py
"""
Unit tests for the annual Isenção budget.
"""

import datetime
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
from clockin.core.finance import exempt_budget_status, remaining_exempt_budget, used_exempt_hours
from clockin.core.models import ThresholdSettings

REFERENCE = datetime.datetime(2025, 6, 1, 12, 0)


class TestExemptBudget:
    """Usage is counted per calendar year of the reference instant."""

    def test_used_hours_only_count_reference_year(self, make_session):
        sessions = [
            make_session(datetime.date(2024, 12, 31), regular=8, exempt=2.0, hour=20),
            make_session(datetime.date(2025, 1, 1), regular=8, exempt=1.5, hour=0),
            make_session(datetime.date(2025, 12, 31), regular=8, exempt=0.5, hour=22),
            make_session(datetime.date(2026, 1, 1), regular=8, exempt=4.0),
        ]

        assert used_exempt_hours(sessions, REFERENCE) == pytest.approx(2.0)

    def test_remaining_budget(self, make_session):
        settings = ThresholdSettings(annual_exempt_limit=10.0)
        sessions = [make_session(datetime.date(2025, 3, 3), regular=8, exempt=2.0) for _ in range(3)]

        assert remaining_exempt_budget(sessions, REFERENCE, settings) == pytest.approx(4.0)

    def test_remaining_never_negative(self, make_session):
        settings = ThresholdSettings(annual_exempt_limit=1.0)
        sessions = [make_session(datetime.date(2025, 3, 3), regular=8, exempt=2.0)]

        assert remaining_exempt_budget(sessions, REFERENCE, settings) == 0.0

    def test_status_reports_usage(self, make_session):
        settings = ThresholdSettings(annual_exempt_limit=200.0)
        sessions = [make_session(datetime.date(2025, 3, 3), regular=8, exempt=2.0) for _ in range(25)]

        status = exempt_budget_status(sessions, REFERENCE, settings)

        assert status.year == 2025
        assert status.used == pytest.approx(50.0)
        assert status.remaining == pytest.approx(150.0)
        assert status.percent_used == pytest.approx(25.0)
        assert status.exhausted is False

    def test_status_exhausted(self, make_session):
        settings = ThresholdSettings(annual_exempt_limit=2.0)
        sessions = [make_session(datetime.date(2025, 3, 3), regular=8, exempt=2.0)]

        status = exempt_budget_status(sessions, REFERENCE, settings)

        assert status.exhausted is True
        assert status.remaining == 0.0
        assert status.percent_used == pytest.approx(100.0)

    def test_zero_limit_reports_zero_percent(self):
        status = exempt_budget_status([], REFERENCE, ThresholdSettings(annual_exempt_limit=0.0))

        assert status.percent_used == 0.0
        assert status.exhausted is True
