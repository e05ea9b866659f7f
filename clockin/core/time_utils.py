import datetime
import logging
from typing import Any

from clockin.core.config import DATE_FORMAT_ISO, ENGINE_TZ
from clockin.core.constants import SECONDS_PER_HOUR

logger = logging.getLogger(__name__)


def to_engine_datetime(value: Any) -> datetime.datetime:
    """Normalize an instant to an aware datetime in the engine timezone.

    Handles:
    1) datetime objects (naive values are taken as engine-local wall time)
    2) date objects (start of that day)
    3) epoch milliseconds as int/float or numeric string
    4) ISO 8601 strings
    5) error handling via logging + ValueError (no bare except)
    """
    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=ENGINE_TZ)
        return value.astimezone(ENGINE_TZ)

    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time.min, tzinfo=ENGINE_TZ)

    if isinstance(value, bool):
        logger.error("Boolean is not a valid instant. value=%r", value)
        raise ValueError("Boolean is not a valid instant")

    if isinstance(value, (int, float)):
        return _from_epoch_ms(value)

    if isinstance(value, str):
        s = value.strip()
        if not s:
            logger.error("Instant is empty string")
            raise ValueError("Instant is empty")

        try:
            return _from_epoch_ms(float(s))
        except ValueError:
            pass

        try:
            parsed = datetime.datetime.fromisoformat(s.replace("Z", "+00:00"))
        except ValueError as e:
            logger.exception("Failed parsing instant string. value=%r", value)
            raise ValueError(f"Invalid instant format: {value!r}") from e
        return to_engine_datetime(parsed)

    logger.error("Unsupported instant type. type=%s value=%r", type(value).__name__, value)
    raise ValueError(f"Unsupported instant type: {type(value).__name__}")


def _from_epoch_ms(value: float) -> datetime.datetime:
    try:
        return datetime.datetime.fromtimestamp(value / 1000.0, tz=ENGINE_TZ)
    except (OverflowError, OSError, ValueError) as e:
        logger.exception("Epoch milliseconds out of range. value=%r", value)
        raise ValueError(f"Epoch milliseconds out of range: {value!r}") from e


def to_epoch_ms(value: datetime.datetime) -> int:
    """Epoch milliseconds for an aware datetime."""
    return int(round(value.timestamp() * 1000))


def hours_between(start: datetime.datetime, end: datetime.datetime) -> float:
    """Decimal hours from start to end, never negative."""
    delta = (end - start).total_seconds() / SECONDS_PER_HOUR
    return max(0.0, delta)


def day_key(value: datetime.datetime) -> str:
    """Calendar-day key ("YYYY-MM-DD") of an instant in the engine timezone."""
    return to_engine_datetime(value).strftime(DATE_FORMAT_ISO)


def start_of_day(day: datetime.date) -> datetime.datetime:
    return datetime.datetime.combine(day, datetime.time.min, tzinfo=ENGINE_TZ)


def end_of_day(day: datetime.date) -> datetime.datetime:
    return datetime.datetime.combine(day, datetime.time.max, tzinfo=ENGINE_TZ)


def year_bounds(reference: datetime.datetime) -> tuple[datetime.datetime, datetime.datetime]:
    """(Jan 1 00:00, Dec 31 23:59:59.999999) of the year containing reference."""
    year = to_engine_datetime(reference).year
    return start_of_day(datetime.date(year, 1, 1)), end_of_day(datetime.date(year, 12, 31))
