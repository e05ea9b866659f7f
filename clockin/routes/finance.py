# clockin/routes/finance.py
"""
API endpoints for session classification, earnings statements and reports.

All endpoints are stateless: the caller sends the sessions to work on.
Settings omitted from a request come from the default settings file.
"""

import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from clockin.core.finance import (
    aggregate_by_period,
    build_session,
    calculate_period_statement,
    check_compliance,
    date_range_for,
    exempt_budget_status,
)
from clockin.core.logging_config import get_logger
from clockin.core.models import (
    ComplianceReport,
    DateRange,
    ExemptBudgetStatus,
    FinanceSettings,
    Granularity,
    PeriodEarningsStatement,
    SeriesPoint,
    ThresholdSettings,
    WorkSession,
)
from clockin.core.report_export import build_time_report_csv, report_filename
from clockin.core.time_utils import to_engine_datetime
from clockin.core.validators import validate_date_range, validate_year
from clockin.routes.shared import (
    ClassifySessionRequest,
    ComplianceRequest,
    ExemptStatusRequest,
    SeriesRequest,
    StatementRequest,
    TimeReportRequest,
    get_default_finance_settings,
    get_default_thresholds,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["finance"])

#: Session fields a client may attach when classifying a session.
SESSION_DETAIL_FIELDS = frozenset({"id", "lunch_amount", "had_dinner", "dinner_amount", "location", "notes"})


def _now() -> datetime.datetime:
    return to_engine_datetime(datetime.datetime.now(datetime.timezone.utc))


@router.post("/sessions/classify", response_model=WorkSession)
def classify_session(
    body: ClassifySessionRequest,
    default_thresholds: ThresholdSettings = Depends(get_default_thresholds),
):
    """Finalize a session: split its hours into regular / Isenção / paid overtime."""
    details = {key: value for key, value in body.details.items() if key in SESSION_DETAIL_FIELDS}
    ignored = set(body.details) - SESSION_DETAIL_FIELDS
    if ignored:
        logger.warning(f"Ignoring unknown session detail fields: {sorted(ignored)}")

    return build_session(
        body.clock_in,
        body.clock_out,
        body.thresholds or default_thresholds,
        history=body.history,
        lunch_duration=body.lunch_duration,
        is_weekend=body.is_weekend,
        is_bank_holiday=body.is_bank_holiday,
        **details,
    )


@router.post("/finance/statement", response_model=PeriodEarningsStatement)
def period_statement(
    body: StatementRequest,
    default_settings: FinanceSettings = Depends(get_default_finance_settings),
):
    """Earnings, deductions and net salary for a date window."""
    date_range = validate_date_range(body.date_range)
    return calculate_period_statement(body.sessions, date_range, body.settings or default_settings)


@router.post("/finance/series", response_model=list[SeriesPoint])
def period_series(
    body: SeriesRequest,
    default_settings: FinanceSettings = Depends(get_default_finance_settings),
):
    """Gross / net / taxes per daily, weekly, monthly or yearly window."""
    date_range = validate_date_range(body.date_range)
    return aggregate_by_period(
        body.sessions,
        date_range,
        body.granularity,
        body.settings or default_settings,
        locale=body.locale,
    )


@router.get("/finance/window", response_model=DateRange)
def report_window(report_type: Granularity, selected_date: datetime.date):
    """The daily / weekly / monthly / yearly window containing selected_date."""
    return date_range_for(report_type, selected_date)


@router.post("/finance/exempt-status", response_model=ExemptBudgetStatus)
def exempt_status(
    body: ExemptStatusRequest,
    default_thresholds: ThresholdSettings = Depends(get_default_thresholds),
):
    """Isenção hours used and remaining in the year of `reference` (default: now)."""
    reference = body.reference or _now()
    return exempt_budget_status(body.sessions, reference, body.thresholds or default_thresholds)


@router.post("/reports/time.csv")
def time_report_csv(body: TimeReportRequest):
    """CSV time report for download."""
    date_range = validate_date_range(body.date_range)
    generated_at = body.generated_at or _now()
    content = build_time_report_csv(body.sessions, date_range, body.report_type, generated_at=generated_at)
    filename = report_filename(body.report_type, generated_at)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/compliance", response_model=ComplianceReport)
def compliance_report(
    body: ComplianceRequest,
    default_thresholds: ThresholdSettings = Depends(get_default_thresholds),
):
    """Portuguese labor-law findings for one calendar year."""
    year = validate_year(body.year)
    return check_compliance(body.sessions, year, body.thresholds or default_thresholds)
