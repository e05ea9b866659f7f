from fastapi import HTTPException, status

from clockin.core.models import DateRange

MIN_YEAR = 1970
MAX_YEAR = 9999


def validate_year(year: int) -> int:
    """
    Make sure a report year is within the supported range.

    Returns the year if it is valid, otherwise raises 400.
    """
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Year must be between {MIN_YEAR} and {MAX_YEAR}",
        )
    return year


def validate_date_range(date_range: DateRange) -> DateRange:
    """Reject windows whose end lies before their start (400)."""
    if date_range.end < date_range.start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Date range end must not be before start",
        )
    return date_range
