import unittest
from datetime import date, timedelta

from habitledger import Frequency, Habit, Streak, current_streak, longest_streak

from helpers import UTC, at


class CurrentStreakTests(unittest.TestCase):
    def test_daily_streak_stops_at_first_gap(self):
        habit = Habit(
            title="Hydrate",
            completed_dates=[at(2026, 2, 3), at(2026, 2, 5), at(2026, 2, 6), at(2026, 2, 7)],
        )
        self.assertEqual(current_streak(habit, date(2026, 2, 7), UTC), Streak(3, "day"))

    def test_daily_streak_is_zero_when_today_is_open(self):
        habit = Habit(title="Hydrate", completed_dates=[at(2026, 2, 5), at(2026, 2, 6)])
        self.assertEqual(current_streak(habit, date(2026, 2, 7), UTC), (0, "day"))

    def test_daily_streak_respects_goal(self):
        habit = Habit(
            title="Water",
            goal=2,
            completed_dates=[
                at(2026, 2, 7, 8),
                at(2026, 2, 7, 9),
                at(2026, 2, 6, 8),
                at(2026, 2, 5, 8),
                at(2026, 2, 5, 9),
            ],
        )
        self.assertEqual(current_streak(habit, date(2026, 2, 7), UTC).count, 1)

    def test_empty_habit_has_no_streak(self):
        habit = Habit(title="New", created_at=at(2026, 2, 7, 9))
        self.assertEqual(current_streak(habit, date(2026, 2, 7), UTC), (0, "day"))

    def test_weekly_streak_counts_weeks_with_any_completed_day(self):
        # 2026-02-11 is a Wednesday
        habit = Habit(
            title="Call home",
            frequency=Frequency.WEEKLY,
            completed_dates=[at(2026, 2, 9), at(2026, 2, 5), at(2026, 1, 20)],
        )
        self.assertEqual(current_streak(habit, date(2026, 2, 11), UTC), Streak(2, "week"))

    def test_weekly_streak_is_zero_when_current_week_is_open(self):
        habit = Habit(title="Call home", frequency=Frequency.WEEKLY, completed_dates=[at(2026, 2, 5)])
        self.assertEqual(current_streak(habit, date(2026, 2, 11), UTC), (0, "week"))

    def test_week_start_changes_week_boundaries(self):
        # 2026-02-08 is a Sunday
        habit = Habit(title="Long run", frequency=Frequency.WEEKLY, completed_dates=[at(2026, 2, 8)])

        self.assertEqual(current_streak(habit, date(2026, 2, 11), UTC, week_start="mon").count, 0)
        self.assertEqual(current_streak(habit, date(2026, 2, 11), UTC, week_start="sun").count, 1)

    def test_custom_habits_use_weekly_cadence(self):
        habit = Habit(
            title="Gym",
            frequency=Frequency.CUSTOM,
            selected_days=[2, 4],
            goal=2,
            completed_dates=[at(2026, 2, 10, 7), at(2026, 2, 10, 19), at(2026, 2, 4, 7)],
        )
        # last week's single event misses the goal of two
        self.assertEqual(current_streak(habit, date(2026, 2, 11), UTC), Streak(1, "week"))

    def test_long_runs_reach_the_first_completion(self):
        today = date(2026, 2, 11)
        days = [today - timedelta(days=offset) for offset in range(400)]
        daily = Habit(title="Read", completed_dates=[at(d.year, d.month, d.day) for d in days])
        self.assertEqual(current_streak(daily, today, UTC), Streak(400, "day"))

        weekly = Habit(
            title="Call home",
            frequency=Frequency.WEEKLY,
            completed_dates=[at(d.year, d.month, d.day) for d in days[::7][:52]],
        )
        self.assertEqual(current_streak(weekly, today, UTC), Streak(52, "week"))


class LongestStreakTests(unittest.TestCase):
    def test_longest_run_of_consecutive_days(self):
        habit = Habit(
            title="Read",
            completed_dates=[at(2026, 3, d) for d in (1, 2, 3, 5, 6)],
        )
        self.assertEqual(longest_streak(habit, UTC), 3)

    def test_several_events_on_one_day_count_once(self):
        habit = Habit(
            title="Water",
            completed_dates=[at(2026, 3, 1, 8), at(2026, 3, 1, 9), at(2026, 3, 2), at(2026, 3, 4)],
        )
        self.assertEqual(longest_streak(habit, UTC), 2)

    def test_goal_is_ignored(self):
        habit = Habit(title="Water", goal=5, completed_dates=[at(2026, 3, 1), at(2026, 3, 2)])
        self.assertEqual(longest_streak(habit, UTC), 2)

    def test_spans_month_boundary(self):
        habit = Habit(title="Read", completed_dates=[at(2026, 2, 27), at(2026, 2, 28), at(2026, 3, 1)])
        self.assertEqual(longest_streak(habit, UTC), 3)

    def test_no_completions(self):
        self.assertEqual(longest_streak(Habit(title="Idle"), UTC), 0)


if __name__ == "__main__":
    unittest.main()
