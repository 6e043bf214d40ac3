from collections import Counter
from datetime import date, datetime, tzinfo
from typing import List, Optional

from .dates import DayLike, instant_key, local_day, now_local, to_day
from .models import Habit


def completions_on(habit: Habit, day: DayLike, tz: Optional[tzinfo] = None) -> List[datetime]:
    target = to_day(day, tz)
    events = [d for d in habit.completed_dates if local_day(d, tz) == target]
    return sorted(events, key=instant_key)


def count_on(habit: Habit, day: DayLike, tz: Optional[tzinfo] = None) -> int:
    target = to_day(day, tz)
    return sum(1 for d in habit.completed_dates if local_day(d, tz) == target)


def counts_by_day(habit: Habit, tz: Optional[tzinfo] = None) -> Counter:
    """Number of completion events on each local day, in one pass."""
    return Counter(local_day(d, tz) for d in habit.completed_dates)


def meets_goal(habit: Habit, count: int) -> bool:
    if habit.goal is not None:
        return count >= habit.goal
    return count > 0


def is_date_completed(habit: Habit, day: DayLike, tz: Optional[tzinfo] = None) -> bool:
    """True when ``day`` meets the habit's daily goal (one event without a goal)."""
    return meets_goal(habit, count_on(habit, day, tz))


def is_completed_today(
    habit: Habit, now: Optional[datetime] = None, tz: Optional[tzinfo] = None
) -> bool:
    return is_date_completed(habit, _today(now, tz), tz)


def today_completion_count(
    habit: Habit, now: Optional[datetime] = None, tz: Optional[tzinfo] = None
) -> int:
    return count_on(habit, _today(now, tz), tz)


def completion_days(habit: Habit, tz: Optional[tzinfo] = None) -> List[date]:
    """Distinct local days holding at least one raw completion event."""
    return sorted(counts_by_day(habit, tz))


def _today(now: Optional[datetime], tz: Optional[tzinfo]) -> date:
    return to_day(now if now is not None else now_local(tz), tz)
