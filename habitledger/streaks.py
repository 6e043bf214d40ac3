from datetime import date, timedelta, tzinfo
from typing import NamedTuple, Optional

from .completion import completion_days, counts_by_day, meets_goal
from .dates import DEFAULT_WEEK_START, date_range, local_day, today_local, week_window
from .models import Frequency, Habit


class Streak(NamedTuple):
    count: int
    unit: str


def _horizon(habit: Habit, today: date, tz: Optional[tzinfo]) -> date:
    # Backward walks stop here even if the clock or the data misbehave.
    candidates = [today]
    if habit.created_at is not None:
        candidates.append(local_day(habit.created_at, tz))
    days = completion_days(habit, tz)
    if days:
        candidates.append(days[0])
    return min(candidates)


def current_streak(
    habit: Habit,
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
    week_start: str = DEFAULT_WEEK_START,
) -> Streak:
    if today is None:
        today = today_local(tz)
    floor = _horizon(habit, today, tz)
    per_day = counts_by_day(habit, tz)

    if habit.frequency == Frequency.DAILY:
        current = 0
        cursor = today
        while cursor >= floor and meets_goal(habit, per_day[cursor]):
            current += 1
            cursor -= timedelta(days=1)
        return Streak(current, "day")

    # Weekly and custom habits are satisfied by any completed day in the week.
    current = 0
    start_date, end_date = week_window(today, week_start)
    while end_date >= floor:
        if not any(meets_goal(habit, per_day[day]) for day in date_range(start_date, end_date)):
            break
        current += 1
        start_date -= timedelta(days=7)
        end_date -= timedelta(days=7)
    return Streak(current, "week")


def longest_streak(habit: Habit, tz: Optional[tzinfo] = None) -> int:
    """Longest run of consecutive days with any completion, ignoring the goal."""
    dates = completion_days(habit, tz)
    if not dates:
        return 0

    longest = 1
    current_run = 1
    for idx in range(1, len(dates)):
        if dates[idx] == dates[idx - 1] + timedelta(days=1):
            current_run += 1
        else:
            longest = max(longest, current_run)
            current_run = 1
    return max(longest, current_run)
