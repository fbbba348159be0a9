"""
Day windows used to query the calendar and to filter what gets displayed

The query window is computed in UTC and widened by one day on each side so
that entries near midnight are not lost to timezone skew. The acceptance
window is the reference day in the display timezone.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo

import pytz

from .exceptions import TimezoneError
from .utils import DEFAULT_DATE_FORMAT

logger = logging.getLogger(__name__)

MAX_PREVIOUS_DAYS = 6
END_OF_DAY = time(23, 59, 59, 999000)


def resolve_timezone(name: str | None) -> tzinfo | None:
    """
    Resolve an IANA timezone name

    Returns:
        pytz timezone, or None for the process local timezone

    Raises:
        TimezoneError if the name is unknown
    """
    if not name:
        return None
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError as e:
        raise TimezoneError(f"unknown timezone: {name}") from e


def to_zone(moment: datetime, tz: tzinfo | None) -> datetime:
    """Convert an aware datetime to tz (None means process local time)"""
    return moment.astimezone(tz)


def localize(naive: datetime, tz: tzinfo | None) -> datetime:
    """Attach tz to a naive wall-clock datetime"""
    if tz is None:
        return naive.astimezone()
    if hasattr(tz, "localize"):
        return tz.localize(naive)
    return naive.replace(tzinfo=tz)


def format_in_zone(
    moment: datetime, tz: tzinfo | None, fmt: str = DEFAULT_DATE_FORMAT
) -> str:
    return to_zone(moment, tz).strftime(fmt)


def clamp_previous_days(previous_days: int) -> int:
    """Out of range look-back values fall back to zero"""
    if previous_days < 0 or previous_days > MAX_PREVIOUS_DAYS:
        logger.warning(
            f"from-previous-days must be between 0 and {MAX_PREVIOUS_DAYS}, "
            f"got {previous_days}; using 0"
        )
        return 0
    return previous_days


@dataclass(frozen=True)
class TimeWindow:
    """Query bounds (UTC) and acceptance bounds (display timezone)"""

    query_start: datetime
    query_end: datetime
    start: datetime
    end: datetime
    tz: tzinfo | None = None

    def contains(self, moment: datetime) -> bool:
        local = to_zone(moment, self.tz)
        return self.start <= local <= self.end

    def query_params(self) -> dict[str, str]:
        return {
            "start": _rfc3339(self.query_start),
            "end": _rfc3339(self.query_end),
        }


def _rfc3339(moment: datetime) -> str:
    return moment.astimezone(pytz.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _day_bounds(day: date, tz: tzinfo | None) -> tuple[datetime, datetime]:
    return (
        localize(datetime.combine(day, time.min), tz),
        localize(datetime.combine(day, END_OF_DAY), tz),
    )


def compute_window(
    now: datetime,
    tz: tzinfo | None = None,
    day_offset: int = 0,
    previous_days: int = 0,
) -> TimeWindow:
    """
    Compute the calendar windows around now

    Args:
        now: Reference instant (naive values are taken as process local time)
        tz: Display timezone, None for process local time
        day_offset: Days to shift the reference day by (may be negative)
        previous_days: Extra days to include before the reference day

    Returns:
        TimeWindow
    """
    if now.tzinfo is None:
        now = now.astimezone()

    previous_days = clamp_previous_days(previous_days)
    shift = timedelta(days=day_offset)
    look_back = timedelta(days=previous_days)

    utc_day = now.astimezone(pytz.utc).date() + shift
    local_day = to_zone(now, tz).date() + shift

    start_utc, end_utc = _day_bounds(utc_day, pytz.utc)
    start_local, _ = _day_bounds(local_day - look_back, tz)
    _, end_local = _day_bounds(local_day, tz)

    one_day = timedelta(days=1)
    return TimeWindow(
        query_start=start_utc - look_back - one_day,
        query_end=end_utc + one_day,
        start=start_local,
        end=end_local,
        tz=tz,
    )
