# clockin/routes/shared.py
"""
Shared request schemas and dependencies for route modules.
"""

import datetime
from functools import lru_cache
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from clockin.core.constants import DEFAULT_LOCALE
from clockin.core.logging_config import get_logger
from clockin.core.models import DateRange, FinanceSettings, Granularity, ThresholdSettings, WorkSession
from clockin.core.storage import load_finance_settings, load_threshold_settings
from clockin.core.time_utils import to_engine_datetime

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_default_thresholds() -> ThresholdSettings:
    """Thresholds from the settings file, used when a request carries none."""
    return load_threshold_settings()


@lru_cache(maxsize=1)
def get_default_finance_settings() -> FinanceSettings:
    """Finance settings from the settings file, used when a request carries none."""
    return load_finance_settings()


def clear_settings_cache() -> None:
    get_default_thresholds.cache_clear()
    get_default_finance_settings.cache_clear()


def keep_valid_sessions(value: Any, field_name: str = "sessions") -> Any:
    """
    Validate session documents one by one and drop the ones that fail.

    A session without a usable clock_in cannot be placed in any window, so it
    is skipped with a warning instead of rejecting the whole report. Anything
    other than a list is returned unchanged for normal validation.
    """
    if not isinstance(value, list):
        return value

    sessions = []
    for index, item in enumerate(value):
        if isinstance(item, WorkSession):
            sessions.append(item)
            continue
        try:
            sessions.append(WorkSession.model_validate(item))
        except ValidationError as e:
            reasons = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
            logger.warning(f"Dropping invalid entry {field_name}[{index}]: {reasons or 'not a session'}")
    return sessions


# ============ Pydantic schemas ============


class RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SessionsRequest(RequestModel):
    """Base for requests that carry the worker's sessions."""

    sessions: list[WorkSession] = []

    @field_validator("sessions", mode="before")
    @classmethod
    def _drop_invalid_sessions(cls, value: Any) -> Any:
        return keep_valid_sessions(value)


def _instant(value: Any) -> Any:
    if value is None:
        return None
    return to_engine_datetime(value)


class ClassifySessionRequest(RequestModel):
    clock_in: datetime.datetime = Field(validation_alias=AliasChoices("clock_in", "clockIn"))
    clock_out: datetime.datetime = Field(validation_alias=AliasChoices("clock_out", "clockOut"))
    lunch_duration: float | None = None
    is_weekend: bool | None = None
    is_bank_holiday: bool | None = None
    history: list[WorkSession] = []
    thresholds: ThresholdSettings | None = None
    details: dict[str, Any] = {}

    @field_validator("clock_in", "clock_out", mode="before")
    @classmethod
    def _coerce_instant(cls, value: Any) -> Any:
        return _instant(value)

    @field_validator("history", mode="before")
    @classmethod
    def _drop_invalid_history(cls, value: Any) -> Any:
        return keep_valid_sessions(value, "history")


class StatementRequest(SessionsRequest):
    date_range: DateRange
    settings: FinanceSettings | None = None


class SeriesRequest(SessionsRequest):
    date_range: DateRange
    # Plain string: unknown granularities yield an empty series
    granularity: str
    locale: str = DEFAULT_LOCALE
    settings: FinanceSettings | None = None


class ExemptStatusRequest(SessionsRequest):
    reference: datetime.datetime | None = None
    thresholds: ThresholdSettings | None = None

    @field_validator("reference", mode="before")
    @classmethod
    def _coerce_instant(cls, value: Any) -> Any:
        return _instant(value)


class TimeReportRequest(SessionsRequest):
    date_range: DateRange
    report_type: Granularity = Granularity.MONTHLY
    generated_at: datetime.datetime | None = None

    @field_validator("generated_at", mode="before")
    @classmethod
    def _coerce_instant(cls, value: Any) -> Any:
        return _instant(value)


class ComplianceRequest(SessionsRequest):
    year: int
    thresholds: ThresholdSettings | None = None
