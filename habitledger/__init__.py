from .completion import (
    completions_on,
    count_on,
    counts_by_day,
    is_completed_today,
    is_date_completed,
    today_completion_count,
)
from .errors import ConfigError, HabitLedgerError, PersistenceError
from .manager import HabitCollection
from .models import Category, Frequency, Habit, Weekday, normalize_goal
from .stats import (
    MonthProgress,
    completion_rate,
    completions_by_weekday,
    habit_summary,
    monthly_progress,
    total_completions,
    week_dates,
    week_progress,
)
from .store import JSONHabitStore, MemoryHabitStore
from .streaks import Streak, current_streak, longest_streak

__version__ = "0.1.0"
