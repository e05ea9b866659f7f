"""
Pytest configuration and shared fixtures for testing.

Provides reusable test fixtures:
- thresholds: Default ThresholdSettings (8h regular, 10h Isenção, 200h/year)
- finance_settings: FinanceSettings with an hourly rate of 10 EUR
- make_session: Factory for finalized WorkSession objects
- test_client: FastAPI TestClient for API integration tests
"""

import datetime
import os
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Engine configuration is read at import time
os.environ["CLOCKIN_TIMEZONE"] = "Europe/Lisbon"
os.environ["CLOCKIN_SETTINGS_FILE"] = str(project_root / "data" / "settings.json")

# ruff: noqa: E402
from fastapi.testclient import TestClient

from clockin.core.models import FinanceSettings, ThresholdSettings, WorkSession
from clockin.main import app
from clockin.routes.shared import clear_settings_cache


@pytest.fixture
def thresholds():
    """Default thresholds: 8h regular, Isenção up to 10h, 200h per year."""
    return ThresholdSettings()


@pytest.fixture
def finance_settings():
    """
    Finance settings used by most earnings tests.

    - hourly_rate: 10 EUR
    - Isenção: 25% of the hourly rate per working day
    - deductions: Segurança Social 11%, no IRS
    """
    return FinanceSettings(
        hourly_rate=10.0,
        exempt_supplement_rate=25.0,
        tax_deduction_mode="both",
        social_security_rate=11.0,
    )


@pytest.fixture
def make_session():
    """
    Factory for finalized sessions with explicit hour buckets.

    Usage:
        make_session(datetime.date(2025, 3, 10), regular=8, exempt=1)
    """

    def _make(day: datetime.date, regular=0.0, exempt=0.0, paid=0.0, hour=9, **fields):
        clock_in = datetime.datetime.combine(day, datetime.time(hour, 0))
        return WorkSession(
            clock_in=clock_in,
            total_hours=fields.pop("total_hours", regular + exempt + paid),
            regular_hours=regular,
            exempt_overtime_hours=exempt,
            paid_overtime_hours=paid,
            **fields,
        )

    return _make


@pytest.fixture(scope="function")
def test_client():
    """
    Create FastAPI TestClient running the application lifespan.

    Yields:
        TestClient: FastAPI test client for API testing
    """
    clear_settings_cache()

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
    clear_settings_cache()
