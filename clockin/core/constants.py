# clockin/core/constants.py
from typing import Final

# ==========================
# Time conversion
# ==========================

#: Number of seconds per hour. Used when timedelta values are turned into hours.
SECONDS_PER_HOUR: Final[int] = 3600

#: Days per week. Used in loops instead of a bare "7".
DAYS_PER_WEEK: Final[int] = 7

#: Index of the first day of the week in Python datetime (0 = Monday).
#: Weekly windows always start on a Monday, like the reporting screens.
WEEK_START_WEEKDAY: Final[int] = 0  # Monday

#: Weekday indexes that count as weekend (Saturday, Sunday).
WEEKEND_WEEKDAYS: Final[tuple[int, ...]] = (5, 6)


# ==========================
# Hour categorization (ThresholdSettings defaults)
# ==========================

#: Hours per day paid as regular time.
DEFAULT_REGULAR_HOURS_THRESHOLD: Final[float] = 8.0

#: Upper bound of the Isenção (exempt overtime) band per day.
DEFAULT_EXEMPT_OVERTIME_THRESHOLD: Final[float] = 10.0

#: Maximum Isenção hours that may be accrued per calendar year.
DEFAULT_ANNUAL_EXEMPT_LIMIT: Final[float] = 200.0

#: Default lunch break deducted from a session, in hours.
DEFAULT_LUNCH_DURATION: Final[float] = 1.0

#: Flat bonus stored on a weekend session, in EUR.
DEFAULT_WEEKEND_BONUS: Final[float] = 100.0

#: Compensatory days off earned per weekend session.
DEFAULT_WEEKEND_DAYS_OFF: Final[float] = 1.0


# ==========================
# Overtime multipliers (Código do Trabalho)
# ==========================

#: First paid overtime hour on a normal day (+25%).
DEFAULT_FIRST_HOUR_RATE: Final[float] = 1.25

#: Each following paid overtime hour on a normal day (+50%).
DEFAULT_SUBSEQUENT_RATE: Final[float] = 1.50

#: Any paid overtime hour on a weekend (+50%).
DEFAULT_WEEKEND_RATE: Final[float] = 1.50

#: Any paid overtime hour on a bank holiday (+100%).
DEFAULT_HOLIDAY_RATE: Final[float] = 2.00


# ==========================
# Deductions
# ==========================

#: Segurança Social employee rate, in percent.
DEFAULT_SOCIAL_SECURITY_RATE: Final[float] = 11.0


# ==========================
# Month names (presentation)
# ==========================

#: Abbreviated month names per locale, indexed by month - 1.
#: Used for chart labels such as "Mar 05, 2026" or "mar 2026".
MONTH_ABBREVIATIONS: Final[dict[str, tuple[str, ...]]] = {
    "en": ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
    "pt": ("jan", "fev", "mar", "abr", "mai", "jun", "jul", "ago", "set", "out", "nov", "dez"),
}

#: Locale used when an unknown one is requested.
DEFAULT_LOCALE: Final[str] = "en"


# ==========================
# Portuguese labor law limits
# ==========================

#: Normal working hours per day.
MAX_DAILY_HOURS: Final[float] = 8.0

#: Absolute daily maximum including overtime.
MAX_DAILY_HOURS_WITH_OVERTIME: Final[float] = 10.0

#: Normal working hours per week.
MAX_WEEKLY_HOURS: Final[float] = 40.0

#: Paid overtime hours allowed per year without a written agreement.
MAX_OVERTIME_YEARLY: Final[float] = 150.0

#: Minimum rest between two working days, in hours.
MIN_REST_BETWEEN_DAYS: Final[float] = 11.0

#: Share of an annual limit (Isenção, paid overtime) that triggers a warning.
LIMIT_WARNING_RATIO: Final[float] = 0.8
