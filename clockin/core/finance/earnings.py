"""Earnings: base, Isenção supplement, overtime, bonuses and meals."""

from collections.abc import Iterable

from clockin.core.models import ExemptCalculationMethod, FinanceSettings, WorkSession


def calculate_base_salary(regular_hours: float, hourly_rate: float) -> float:
    """Base salary = regular hours * hourly rate."""
    return max(0.0, regular_hours) * max(0.0, hourly_rate)


def calculate_exempt_supplement(
    hourly_rate: float,
    rate_or_amount: float,
    working_days: int,
    method: ExemptCalculationMethod = ExemptCalculationMethod.PERCENTAGE,
) -> float:
    """
    Calculates the Isenção (IHT) supplement.

    Formula:
        fixed:      the configured amount as a lump sum for the whole period
        percentage: hourly_rate * (rate / 100) * working days

    The percentage supplement is paid per working day for being in the
    exemption regime, regardless of how many Isenção hours were used.

    Args:
        hourly_rate: Hourly rate in EUR
        rate_or_amount: Percentage (percentage method) or EUR amount (fixed method)
        working_days: Distinct calendar days with at least one session
        method: ExemptCalculationMethod

    Returns:
        Supplement in EUR
    """
    if rate_or_amount <= 0:
        return 0.0

    if method == ExemptCalculationMethod.FIXED:
        return rate_or_amount

    if working_days <= 0:
        return 0.0

    return daily_exempt_supplement(hourly_rate, rate_or_amount) * working_days


def daily_exempt_supplement(hourly_rate: float, rate: float) -> float:
    """Percentage-method supplement for one working day."""
    if rate <= 0:
        return 0.0
    return max(0.0, hourly_rate) * (rate / 100.0)


def calculate_overtime_pay(
    paid_overtime_hours: float,
    hourly_rate: float,
    is_weekend: bool,
    is_holiday: bool,
    settings: FinanceSettings,
) -> float:
    """
    Calculates overtime pay for one session.

    Priority: holiday > weekend > tiered weekday rates
    (first hour at first_hour_rate, the rest at subsequent_rate).

    Args:
        paid_overtime_hours: Paid overtime hours of the session
        hourly_rate: Hourly rate in EUR
        is_weekend: Session flagged as weekend
        is_holiday: Session flagged as bank holiday
        settings: FinanceSettings with the multipliers

    Returns:
        Overtime pay in EUR
    """
    hours = max(0.0, paid_overtime_hours)
    rate = max(0.0, hourly_rate)
    if hours <= 0:
        return 0.0

    if is_holiday:
        return hours * rate * settings.holiday_rate

    if is_weekend:
        return hours * rate * settings.weekend_rate

    if hours <= 1:
        return hours * rate * settings.first_hour_rate

    first_hour = rate * settings.first_hour_rate
    subsequent = (hours - 1) * rate * settings.subsequent_rate
    return first_hour + subsequent


def session_overtime_pay(session: WorkSession, settings: FinanceSettings) -> float:
    """Overtime pay of one session, using its own weekend and holiday flags."""
    return calculate_overtime_pay(
        session.paid_overtime_hours,
        settings.hourly_rate,
        session.is_weekend,
        session.is_bank_holiday,
        settings,
    )


def calculate_weekend_bonus(sessions: Iterable[WorkSession]) -> float:
    """Sum of the flat weekend bonuses stored on the sessions."""
    return sum(s.weekend_bonus for s in sessions)


def calculate_meal_allowances(sessions: Iterable[WorkSession], included: bool) -> float:
    """Lunch + dinner amounts, only when meal allowances are part of the salary."""
    if not included:
        return 0.0
    return sum(s.meal_amount for s in sessions)


def calculate_meal_subsidy(daily_meal_subsidy: float, working_days: int) -> float:
    """Subsídio de refeição = daily subsidy * working days."""
    return max(0.0, daily_meal_subsidy) * max(0, working_days)


def calculate_gross_salary(
    base_salary: float,
    exempt_supplement: float,
    overtime_pay: float,
    weekend_bonus: float,
    meal_allowances: float,
    fixed_bonus: float = 0.0,
    meal_subsidy: float = 0.0,
) -> float:
    """Sum of every earnings component for the period."""
    return base_salary + exempt_supplement + overtime_pay + weekend_bonus + meal_allowances + fixed_bonus + meal_subsidy
