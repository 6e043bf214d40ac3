import calendar
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import List, Optional, Tuple, Union

WEEK_START_OPTIONS = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]
DEFAULT_WEEK_START = "mon"

DayLike = Union[date, datetime]


def now_local(tz: Optional[tzinfo] = None) -> datetime:
    if tz is None:
        return datetime.now().astimezone()
    return datetime.now(tz)


def today_local(tz: Optional[tzinfo] = None) -> date:
    return now_local(tz).date()


def local_day(instant: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar day of ``instant`` in the reference zone.

    Naive datetimes are taken as wall-clock times already in the reference
    zone. Aware ones are converted first; ``tz=None`` means the system zone.
    """
    if instant.tzinfo is None:
        return instant.date()
    return instant.astimezone(tz).date()


def to_day(value: DayLike, tz: Optional[tzinfo] = None) -> date:
    # datetime subclasses date, so test for it first.
    if isinstance(value, datetime):
        return local_day(value, tz)
    return value


def instant_key(instant: datetime) -> datetime:
    return instant.astimezone(timezone.utc)


def format_date(value: date) -> str:
    return value.isoformat()


def parse_instant(value: Optional[str]) -> Optional[datetime]:
    if not value or not isinstance(value, str):
        return None
    try:
        if value.endswith("Z"):
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def format_instant(value: datetime) -> str:
    return value.isoformat()


def window_dates(end_date: date, days: int) -> List[date]:
    return [end_date - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def date_range(start_date: date, end_date: date) -> List[date]:
    if end_date < start_date:
        return []
    span = (end_date - start_date).days
    return [start_date + timedelta(days=offset) for offset in range(span + 1)]


def weekday_index(label: str) -> int:
    return WEEK_START_OPTIONS.index(label)


def week_window(day: date, week_start: str = DEFAULT_WEEK_START) -> Tuple[date, date]:
    start_idx = weekday_index(week_start)
    delta = (day.weekday() - start_idx) % 7
    start_date = day - timedelta(days=delta)
    return start_date, start_date + timedelta(days=6)


def weekday_code(day: date) -> int:
    """Weekday numbered 1 (Sunday) through 7 (Saturday)."""
    return day.isoweekday() % 7 + 1


def month_start(day: date) -> date:
    return day.replace(day=1)


def add_months(first_of_month: date, months: int) -> date:
    index = first_of_month.year * 12 + (first_of_month.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def days_in_month(day: date) -> int:
    return calendar.monthrange(day.year, day.month)[1]
