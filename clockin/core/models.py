"""
Value types for the earnings engine.

Every model is frozen. Inputs accept both the snake_case field names and the
camelCase names used by the session/settings documents of the host app.
Invalid numbers (None, NaN, inf, text) fall back to the field default instead
of failing, so a report can always be produced.
"""

import datetime
import math
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic_core import PydanticUseDefault

from clockin.core.constants import (
    DEFAULT_ANNUAL_EXEMPT_LIMIT,
    DEFAULT_EXEMPT_OVERTIME_THRESHOLD,
    DEFAULT_FIRST_HOUR_RATE,
    DEFAULT_HOLIDAY_RATE,
    DEFAULT_LUNCH_DURATION,
    DEFAULT_REGULAR_HOURS_THRESHOLD,
    DEFAULT_SOCIAL_SECURITY_RATE,
    DEFAULT_SUBSEQUENT_RATE,
    DEFAULT_WEEKEND_BONUS,
    DEFAULT_WEEKEND_DAYS_OFF,
    DEFAULT_WEEKEND_RATE,
)
from clockin.core.time_utils import end_of_day, hours_between, to_engine_datetime


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


def coerce_number(value: Any) -> float:
    """
    Convert loosely typed input to a finite, non-negative float.

    Raises PydanticUseDefault for anything that is not a usable number, which
    makes pydantic fall back to the field default.
    """
    if value is None:
        raise PydanticUseDefault()

    if isinstance(value, bool):
        number = float(value)
    elif isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().replace(",", "."))
        except ValueError:
            raise PydanticUseDefault() from None
    else:
        raise PydanticUseDefault()

    if not math.isfinite(number):
        raise PydanticUseDefault()

    return max(0.0, number)


def coerce_flag(value: Any) -> bool:
    if value is None:
        raise PydanticUseDefault()
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


class EngineModel(BaseModel):
    """Base for all engine value types."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


# ==========================
# Enums
# ==========================


class ExemptCalculationMethod(str, Enum):
    """How the Isenção (IHT) supplement is paid."""

    PERCENTAGE = "percentage"
    FIXED = "fixed"


class TaxDeductionMode(str, Enum):
    """Which deductions are applied to a statement."""

    IRS = "irs"
    SOCIAL_SECURITY = "social_security"
    CUSTOM = "custom"
    BOTH = "both"


class IrsStrategy(str, Enum):
    """IRS withholding strategy, resolved once when FinanceSettings are loaded."""

    SEPARATE_RATES = "separate_rates"
    LEGACY_SINGLE_RATE = "legacy_single_rate"


class Granularity(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


# ==========================
# Inputs
# ==========================


class WorkSession(EngineModel):
    """A finalized unit of work with frozen hour buckets."""

    id: str | None = None
    clock_in: datetime.datetime = Field(validation_alias=_alias("clock_in", "clockIn"))
    clock_out: datetime.datetime | None = Field(default=None, validation_alias=_alias("clock_out", "clockOut"))
    total_hours: float = Field(default=0.0, validation_alias=_alias("total_hours", "totalHours"))
    lunch_duration: float = Field(default=0.0, validation_alias=_alias("lunch_duration", "lunchDuration"))

    regular_hours: float = Field(default=0.0, validation_alias=_alias("regular_hours", "regularHours"))
    exempt_overtime_hours: float = Field(
        default=0.0,
        validation_alias=_alias("exempt_overtime_hours", "exemptOvertimeHours", "unpaidExtraHours", "isencaoHours"),
    )
    paid_overtime_hours: float = Field(
        default=0.0,
        validation_alias=_alias("paid_overtime_hours", "paidOvertimeHours", "paidExtraHours"),
    )

    is_weekend: bool = Field(default=False, validation_alias=_alias("is_weekend", "isWeekend"))
    is_bank_holiday: bool = Field(default=False, validation_alias=_alias("is_bank_holiday", "isBankHoliday"))

    lunch_amount: float = Field(default=0.0, validation_alias=_alias("lunch_amount", "lunchAmount"))
    had_dinner: bool = Field(default=False, validation_alias=_alias("had_dinner", "hadDinner"))
    dinner_amount: float = Field(default=0.0, validation_alias=_alias("dinner_amount", "dinnerAmount"))
    weekend_bonus: float = Field(default=0.0, validation_alias=_alias("weekend_bonus", "weekendBonus"))
    weekend_days_off: float = Field(default=0.0, validation_alias=_alias("weekend_days_off", "weekendDaysOff"))

    location: str = ""
    notes: str = ""

    @model_validator(mode="before")
    @classmethod
    def _derive_total_hours(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if data.get("total_hours") is not None or data.get("totalHours") is not None:
            return data

        clock_in = data.get("clock_in", data.get("clockIn"))
        clock_out = data.get("clock_out", data.get("clockOut"))
        if clock_in is None or clock_out is None:
            return data

        try:
            total = hours_between(to_engine_datetime(clock_in), to_engine_datetime(clock_out))
        except ValueError:
            # Field validation reports the bad instant
            return data
        return {**data, "total_hours": total}

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if value is None:
            return None
        return str(value)

    @field_validator("clock_in", "clock_out", mode="before")
    @classmethod
    def _coerce_instant(cls, value: Any) -> Any:
        if value is None:
            return None
        return to_engine_datetime(value)

    @field_validator(
        "total_hours",
        "lunch_duration",
        "regular_hours",
        "exempt_overtime_hours",
        "paid_overtime_hours",
        "lunch_amount",
        "dinner_amount",
        "weekend_bonus",
        "weekend_days_off",
        mode="before",
    )
    @classmethod
    def _coerce_numbers(cls, value: Any) -> float:
        return coerce_number(value)

    @field_validator("is_weekend", "is_bank_holiday", "had_dinner", mode="before")
    @classmethod
    def _coerce_flags(cls, value: Any) -> bool:
        return coerce_flag(value)

    @field_validator("location", "notes", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @property
    def working_hours(self) -> float:
        """Total hours minus lunch, never negative."""
        return max(0.0, self.total_hours - self.lunch_duration)

    @property
    def is_special_day(self) -> bool:
        return self.is_weekend or self.is_bank_holiday

    @property
    def categorized_hours(self) -> float:
        return self.regular_hours + self.exempt_overtime_hours + self.paid_overtime_hours

    @property
    def meal_amount(self) -> float:
        """Lunch plus dinner (dinner only counts when had_dinner is set)."""
        return self.lunch_amount + (self.dinner_amount if self.had_dinner else 0.0)


class ThresholdSettings(EngineModel):
    """Per-worker configuration for the session classifier."""

    regular_hours_threshold: float = Field(
        default=DEFAULT_REGULAR_HOURS_THRESHOLD,
        validation_alias=_alias("regular_hours_threshold", "regularHoursThreshold"),
    )
    enable_exempt_overtime: bool = Field(
        default=True,
        validation_alias=_alias("enable_exempt_overtime", "enableExemptOvertime", "enableUnpaidExtra"),
    )
    exempt_overtime_threshold: float = Field(
        default=DEFAULT_EXEMPT_OVERTIME_THRESHOLD,
        validation_alias=_alias("exempt_overtime_threshold", "exemptOvertimeThreshold", "unpaidExtraThreshold"),
    )
    annual_exempt_limit: float = Field(
        default=DEFAULT_ANNUAL_EXEMPT_LIMIT,
        validation_alias=_alias("annual_exempt_limit", "annualExemptLimit", "annualIsencaoLimit"),
    )
    default_lunch_duration: float = Field(
        default=DEFAULT_LUNCH_DURATION,
        validation_alias=_alias("default_lunch_duration", "lunchDuration"),
    )
    weekend_bonus: float = Field(
        default=DEFAULT_WEEKEND_BONUS,
        validation_alias=_alias("weekend_bonus", "weekendBonus"),
    )
    weekend_days_off: float = Field(
        default=DEFAULT_WEEKEND_DAYS_OFF,
        validation_alias=_alias("weekend_days_off", "weekendDaysOff"),
    )

    @field_validator(
        "regular_hours_threshold",
        "exempt_overtime_threshold",
        "annual_exempt_limit",
        "default_lunch_duration",
        "weekend_bonus",
        "weekend_days_off",
        mode="before",
    )
    @classmethod
    def _coerce_numbers(cls, value: Any) -> float:
        return coerce_number(value)

    @field_validator("enable_exempt_overtime", mode="before")
    @classmethod
    def _coerce_flags(cls, value: Any) -> bool:
        return coerce_flag(value)

    @property
    def exempt_band(self) -> float:
        """Width of the Isenção band per day (hours between the two thresholds)."""
        return max(0.0, self.exempt_overtime_threshold - self.regular_hours_threshold)


class FinanceSettings(EngineModel):
    """Rates and switches used by the earnings and deduction calculators."""

    hourly_rate: float = Field(default=0.0, validation_alias=_alias("hourly_rate", "hourlyRate"))

    exempt_calculation_method: ExemptCalculationMethod = Field(
        default=ExemptCalculationMethod.PERCENTAGE,
        validation_alias=_alias("exempt_calculation_method", "calculationMethod", "isencaoCalculationMethod"),
    )
    exempt_supplement_rate: float = Field(
        default=0.0,
        validation_alias=_alias("exempt_supplement_rate", "exemptSupplementRate", "isencaoRate"),
    )
    exempt_fixed_amount: float = Field(
        default=0.0,
        validation_alias=_alias("exempt_fixed_amount", "exemptFixedAmount", "isencaoFixedAmount"),
    )

    tax_deduction_mode: TaxDeductionMode = Field(
        default=TaxDeductionMode.BOTH,
        validation_alias=_alias("tax_deduction_mode", "taxDeductionMode", "taxDeductionType"),
    )
    irs_base_salary_rate: float = Field(
        default=0.0,
        validation_alias=_alias("irs_base_salary_rate", "irsBaseSalaryRate"),
    )
    irs_exempt_rate: float = Field(
        default=0.0,
        validation_alias=_alias("irs_exempt_rate", "irsExemptRate", "irsIhtRate"),
    )
    irs_overtime_rate: float = Field(default=0.0, validation_alias=_alias("irs_overtime_rate", "irsOvertimeRate"))
    irs_rate: float = Field(default=0.0, validation_alias=_alias("irs_rate", "irsRate"))
    social_security_rate: float = Field(
        default=DEFAULT_SOCIAL_SECURITY_RATE,
        validation_alias=_alias("social_security_rate", "socialSecurityRate"),
    )
    custom_tax_rate: float = Field(default=0.0, validation_alias=_alias("custom_tax_rate", "customTaxRate"))

    meal_allowance_included: bool = Field(
        default=False,
        validation_alias=_alias("meal_allowance_included", "mealAllowanceIncluded"),
    )

    first_hour_rate: float = Field(
        default=DEFAULT_FIRST_HOUR_RATE,
        validation_alias=_alias("first_hour_rate", "firstHourRate", "overtimeFirstHourRate"),
    )
    subsequent_rate: float = Field(
        default=DEFAULT_SUBSEQUENT_RATE,
        validation_alias=_alias("subsequent_rate", "subsequentRate", "overtimeSubsequentRate"),
    )
    weekend_rate: float = Field(
        default=DEFAULT_WEEKEND_RATE,
        validation_alias=_alias("weekend_rate", "weekendRate", "weekendOvertimeRate"),
    )
    holiday_rate: float = Field(
        default=DEFAULT_HOLIDAY_RATE,
        validation_alias=_alias("holiday_rate", "holidayRate", "holidayOvertimeRate"),
    )

    fixed_bonus: float = Field(default=0.0, validation_alias=_alias("fixed_bonus", "fixedBonus"))
    daily_meal_subsidy: float = Field(default=0.0, validation_alias=_alias("daily_meal_subsidy", "dailyMealSubsidy"))
    meal_card_deduction: float = Field(
        default=0.0,
        validation_alias=_alias("meal_card_deduction", "mealCardDeduction"),
    )

    # Declared last so the rates above are already validated when it resolves
    irs_strategy: IrsStrategy | None = Field(
        default=None,
        validate_default=True,
        validation_alias=_alias("irs_strategy", "irsStrategy"),
    )

    @field_validator(
        "hourly_rate",
        "exempt_supplement_rate",
        "exempt_fixed_amount",
        "irs_base_salary_rate",
        "irs_exempt_rate",
        "irs_overtime_rate",
        "irs_rate",
        "social_security_rate",
        "custom_tax_rate",
        "first_hour_rate",
        "subsequent_rate",
        "weekend_rate",
        "holiday_rate",
        "fixed_bonus",
        "daily_meal_subsidy",
        "meal_card_deduction",
        mode="before",
    )
    @classmethod
    def _coerce_numbers(cls, value: Any) -> float:
        return coerce_number(value)

    @field_validator("meal_allowance_included", mode="before")
    @classmethod
    def _coerce_flags(cls, value: Any) -> bool:
        return coerce_flag(value)

    @field_validator("exempt_calculation_method", "tax_deduction_mode", mode="before")
    @classmethod
    def _coerce_choice(cls, value: Any, info: ValidationInfo) -> Any:
        choices = ExemptCalculationMethod if info.field_name == "exempt_calculation_method" else TaxDeductionMode
        if isinstance(value, choices):
            return value
        if not isinstance(value, str) or value.strip().lower() not in {c.value for c in choices}:
            raise PydanticUseDefault()
        return value.strip().lower()

    @field_validator("irs_strategy", mode="after")
    @classmethod
    def _resolve_irs_strategy(cls, value: IrsStrategy | None, info: ValidationInfo) -> IrsStrategy:
        if value is not None:
            return value
        data = info.data
        slice_rates = (
            data.get("irs_base_salary_rate", 0.0),
            data.get("irs_exempt_rate", 0.0),
            data.get("irs_overtime_rate", 0.0),
        )
        if any(rate > 0 for rate in slice_rates):
            return IrsStrategy.SEPARATE_RATES
        return IrsStrategy.LEGACY_SINGLE_RATE


def _date_only(value: Any) -> datetime.date | None:
    """The calendar date of a date object or a "YYYY-MM-DD" string, else None."""
    if isinstance(value, datetime.datetime):
        return None
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str) and "-" in value:
        try:
            return datetime.date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


class DateRange(EngineModel):
    """Inclusive window [start, end] of instants."""

    start: datetime.datetime
    end: datetime.datetime

    @field_validator("start", mode="before")
    @classmethod
    def _coerce_start(cls, value: Any) -> datetime.datetime:
        return to_engine_datetime(value)

    @field_validator("end", mode="before")
    @classmethod
    def _coerce_end(cls, value: Any) -> datetime.datetime:
        # A bare date closes the window at the end of that day
        day = _date_only(value)
        if day is not None:
            return end_of_day(day)
        return to_engine_datetime(value)

    def contains(self, instant: datetime.datetime) -> bool:
        return self.start <= instant <= self.end


# ==========================
# Outputs
# ==========================


class HourBreakdown(EngineModel):
    """Three-way split of one session's working hours."""

    regular: float = 0.0
    exempt_overtime: float = 0.0
    paid_overtime: float = 0.0

    @property
    def total(self) -> float:
        return self.regular + self.exempt_overtime + self.paid_overtime


class HourTotals(EngineModel):
    regular: float = 0.0
    exempt: float = 0.0
    paid_overtime: float = 0.0
    total: float = 0.0


class EarningsBreakdown(EngineModel):
    base_salary: float = 0.0
    exempt_supplement: float = 0.0
    overtime: float = 0.0
    weekend_bonus: float = 0.0
    meal_allowances: float = 0.0
    fixed_bonus: float = 0.0
    meal_subsidy: float = 0.0
    gross_salary: float = 0.0


class Deductions(EngineModel):
    """Deductions for a period. `total` never includes the meal card deduction."""

    irs: float = 0.0
    irs_base_salary: float = 0.0
    irs_exempt: float = 0.0
    irs_overtime: float = 0.0
    social_security: float = 0.0
    custom: float = 0.0
    meal_card_deduction: float = 0.0
    total: float = 0.0

    @property
    def total_with_meal_card(self) -> float:
        return self.total + self.meal_card_deduction


class SessionLineItem(EngineModel):
    """One session's share of a statement, for itemized views."""

    id: str | None = None
    date: datetime.datetime
    regular_hours: float = 0.0
    exempt_hours: float = 0.0
    paid_overtime_hours: float = 0.0
    is_weekend: bool = False
    is_holiday: bool = False
    weekend_bonus: float = 0.0
    lunch_amount: float = 0.0
    dinner_amount: float = 0.0
    base_earnings: float = 0.0
    exempt_earnings: float = 0.0
    overtime_earnings: float = 0.0
    meal_earnings: float = 0.0
    total_earnings: float = 0.0


class PeriodEarningsStatement(EngineModel):
    start: datetime.datetime
    end: datetime.datetime
    session_count: int = 0
    hours: HourTotals = HourTotals()
    earnings: EarningsBreakdown = EarningsBreakdown()
    working_days: int = 0
    deductions: Deductions = Deductions()
    net_salary: float = 0.0
    sessions: tuple[SessionLineItem, ...] = ()

    @classmethod
    def empty(cls, date_range: DateRange) -> "PeriodEarningsStatement":
        """Fully zeroed statement for a window without sessions."""
        return cls(start=date_range.start, end=date_range.end)


class SeriesPoint(EngineModel):
    """One chart point of the period series."""

    label: str
    start: datetime.datetime
    end: datetime.datetime
    gross_income: float = 0.0
    net_income: float = 0.0
    taxes: float = 0.0


class ExemptBudgetStatus(EngineModel):
    """Isenção usage for one calendar year."""

    year: int
    limit: float
    used: float
    remaining: float
    percent_used: float
    exhausted: bool


class HourSummary(EngineModel):
    """Hour statistics for a set of sessions."""

    total_hours: float = 0.0
    regular_hours: float = 0.0
    exempt_hours: float = 0.0
    paid_overtime_hours: float = 0.0
    lunch_hours: float = 0.0
    session_count: int = 0
    sessions_with_lunch: int = 0
    days_worked: int = 0
    average_hours_per_day: float = 0.0


class WeekendSummary(EngineModel):
    weekend_sessions: int = 0
    days_off_earned: float = 0.0
    weekend_bonus: float = 0.0


class ComplianceSeverity(str, Enum):
    WARNING = "warning"
    VIOLATION = "violation"


class ComplianceFinding(EngineModel):
    """One labor-law limit that was approached or exceeded."""

    rule: str
    severity: ComplianceSeverity
    period: str
    value: float
    limit: float
    message: str


class ComplianceReport(EngineModel):
    year: int
    findings: tuple[ComplianceFinding, ...] = ()
    paid_overtime_hours: float = 0.0
    exempt_status: ExemptBudgetStatus
    compliant: bool = True
