"""IRS, Segurança Social and custom tax deductions."""

from clockin.core.models import Deductions, FinanceSettings, IrsStrategy, TaxDeductionMode

_IRS_MODES = (TaxDeductionMode.IRS, TaxDeductionMode.BOTH)
_SOCIAL_SECURITY_MODES = (TaxDeductionMode.SOCIAL_SECURITY, TaxDeductionMode.BOTH)


def calculate_tax_deductions(
    base_salary: float,
    exempt_supplement: float,
    overtime_pay: float,
    settings: FinanceSettings,
) -> Deductions:
    """
    Calculates deductions from the taxable slices of a period.

    Rules:
        - Segurança Social base is always base + Isenção (no overtime, bonuses
          or meal amounts); applied in modes social_security and both
        - IRS in modes irs and both: per-slice rates with the separate_rates
          strategy, otherwise the legacy single rate on base + Isenção + overtime
        - custom: mode custom taxes base + Isenção + overtime; mode both with a
          custom rate taxes what is left after IRS
        - total = irs + social security + custom (meal card is netted separately)

    Args:
        base_salary: Base salary in EUR
        exempt_supplement: Isenção supplement in EUR
        overtime_pay: Overtime pay in EUR
        settings: FinanceSettings

    Returns:
        Deductions (meal_card_deduction copied from settings, not part of total)
    """
    mode = settings.tax_deduction_mode
    gross_for_tax = base_salary + exempt_supplement + overtime_pay

    social_security = 0.0
    if mode in _SOCIAL_SECURITY_MODES:
        social_security = (base_salary + exempt_supplement) * (settings.social_security_rate / 100.0)

    irs = irs_base_salary = irs_exempt = irs_overtime = 0.0
    if mode in _IRS_MODES:
        if settings.irs_strategy == IrsStrategy.SEPARATE_RATES:
            irs_base_salary = base_salary * (settings.irs_base_salary_rate / 100.0)
            irs_exempt = exempt_supplement * (settings.irs_exempt_rate / 100.0)
            irs_overtime = overtime_pay * (settings.irs_overtime_rate / 100.0)
            irs = irs_base_salary + irs_exempt + irs_overtime
        else:
            irs = gross_for_tax * (settings.irs_rate / 100.0)

    custom = 0.0
    if mode == TaxDeductionMode.CUSTOM:
        custom = gross_for_tax * (settings.custom_tax_rate / 100.0)
    elif mode == TaxDeductionMode.BOTH and settings.custom_tax_rate > 0:
        custom = max(0.0, gross_for_tax - irs) * (settings.custom_tax_rate / 100.0)

    return Deductions(
        irs=irs,
        irs_base_salary=irs_base_salary,
        irs_exempt=irs_exempt,
        irs_overtime=irs_overtime,
        social_security=social_security,
        custom=custom,
        meal_card_deduction=settings.meal_card_deduction,
        total=irs + social_security + custom,
    )


def calculate_net_salary(gross_salary: float, total_deductions: float, meal_card_deduction: float = 0.0) -> float:
    """Net = gross - deductions - meal card, never below zero."""
    return max(0.0, gross_salary - total_deductions - meal_card_deduction)
