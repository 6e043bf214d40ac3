from datetime import date, tzinfo
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from .completion import completion_days, count_on, counts_by_day, is_date_completed, meets_goal
from .dates import (
    DEFAULT_WEEK_START,
    add_months,
    date_range,
    days_in_month,
    local_day,
    month_start,
    today_local,
    week_window,
    weekday_code,
    window_dates,
)
from .models import Habit
from .streaks import current_streak, longest_streak

MONTHLY_WINDOW = 6


class MonthProgress(NamedTuple):
    month: date
    completion: float


def completion_rate(
    habit: Habit, days: int, today: Optional[date] = None, tz: Optional[tzinfo] = None
) -> float:
    """Share of the last ``days`` days (today included) that met the goal."""
    if days < 1:
        raise ValueError("days must be at least 1")
    if today is None:
        today = today_local(tz)
    per_day = counts_by_day(habit, tz)
    completed = sum(1 for day in window_dates(today, days) if meets_goal(habit, per_day[day]))
    return completed / days


def completions_by_weekday(habit: Habit, tz: Optional[tzinfo] = None) -> Dict[int, int]:
    """Completion events per weekday (1 = Sunday .. 7 = Saturday).

    Only events on days that met the goal are counted, and every such event
    counts, so a day with three qualifying events adds three.
    """
    counts = {code: 0 for code in range(1, 8)}
    for day, events in counts_by_day(habit, tz).items():
        if meets_goal(habit, events):
            counts[weekday_code(day)] += events
    return counts


def monthly_progress(
    habit: Habit,
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
    months: int = MONTHLY_WINDOW,
) -> List[MonthProgress]:
    if today is None:
        today = today_local(tz)
    current = month_start(today)
    per_month: Dict[date, int] = {}
    for instant in habit.completed_dates:
        key = month_start(local_day(instant, tz))
        per_month[key] = per_month.get(key, 0) + 1

    results = []
    for offset in range(months - 1, -1, -1):
        first = add_months(current, -offset)
        results.append(MonthProgress(first, per_month.get(first, 0) / days_in_month(first)))
    return results


def total_completions(habit: Habit) -> int:
    return len(habit.completed_dates)


def week_dates(today: Optional[date] = None, week_start: str = DEFAULT_WEEK_START) -> List[date]:
    if today is None:
        today = today_local()
    start_date, end_date = week_window(today, week_start)
    return date_range(start_date, end_date)


def week_progress(
    habit: Habit,
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
    week_start: str = DEFAULT_WEEK_START,
) -> List[Tuple[date, bool]]:
    if today is None:
        today = today_local(tz)
    return [(day, is_date_completed(habit, day, tz)) for day in week_dates(today, week_start)]


def habit_summary(
    habit: Habit,
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
    week_start: str = DEFAULT_WEEK_START,
    days: int = 7,
) -> Dict[str, Any]:
    if today is None:
        today = today_local(tz)
    days_done = completion_days(habit, tz)
    streak = current_streak(habit, today, tz, week_start)
    return {
        "id": habit.id,
        "title": habit.title,
        "frequency": habit.frequency.label,
        "goal": habit.goal,
        "today_count": count_on(habit, today, tz),
        "completed_today": is_date_completed(habit, today, tz),
        "current": streak.count,
        "unit": streak.unit,
        "longest": longest_streak(habit, tz),
        "rate": completion_rate(habit, days, today, tz),
        "total": total_completions(habit),
        "last_date": days_done[-1] if days_done else None,
    }
