import unittest
from datetime import date, time, timedelta

from habitledger import Category, Frequency, Habit, Weekday, normalize_goal

from helpers import UTC, at


class HabitRecordTests(unittest.TestCase):
    def test_selected_days_only_kept_for_custom(self):
        daily = Habit(title="Read", selected_days=[Weekday.MONDAY])
        custom = Habit(title="Gym", frequency=Frequency.CUSTOM, selected_days=[2, 6])

        self.assertEqual(daily.selected_days, set())
        self.assertEqual(custom.selected_days, {Weekday.MONDAY, Weekday.FRIDAY})

        custom.frequency = Frequency.WEEKLY
        self.assertEqual(custom.selected_days, set())

        custom.selected_days = [Weekday.TUESDAY]
        self.assertEqual(custom.selected_days, set())

    def test_identity_cannot_change(self):
        habit = Habit(title="Read")
        habit.id = "abc"
        habit.created_at = at(2026, 1, 1)

        with self.assertRaises(AttributeError):
            habit.id = "xyz"
        with self.assertRaises(AttributeError):
            habit.created_at = at(2026, 1, 2)
        self.assertEqual(habit.id, "abc")

    def test_enum_fields_accept_values(self):
        habit = Habit(title="Read", frequency="weekly", category="learning")
        self.assertIs(habit.frequency, Frequency.WEEKLY)
        self.assertIs(habit.category, Category.LEARNING)

    def test_add_completion_keeps_events_distinct(self):
        habit = Habit(title="Water")
        moment = at(2026, 2, 10, 8)

        first = habit.add_completion(moment)
        second = habit.add_completion(moment)

        self.assertEqual(first, moment)
        self.assertEqual(second, moment + timedelta(microseconds=1))
        self.assertEqual(len(habit.completed_dates), 2)

    def test_completions_stay_chronological(self):
        habit = Habit(title="Water", completed_dates=[at(2026, 2, 10, 12), at(2026, 2, 10, 8)])
        habit.add_completion(at(2026, 2, 10, 10))
        self.assertEqual(
            habit.completed_dates,
            [at(2026, 2, 10, 8), at(2026, 2, 10, 10), at(2026, 2, 10, 12)],
        )

    def test_remove_completions_on_day(self):
        habit = Habit(
            title="Water",
            completed_dates=[at(2026, 2, 9), at(2026, 2, 10, 8), at(2026, 2, 10, 9)],
        )
        self.assertEqual(habit.remove_completions_on(date(2026, 2, 10), UTC), 2)
        self.assertEqual(habit.completed_dates, [at(2026, 2, 9)])
        self.assertFalse(habit.remove_completion(at(2026, 2, 10, 8)))

    def test_invalid_goal_means_no_goal(self):
        self.assertIsNone(Habit(title="Read", goal=0).goal)
        self.assertIsNone(Habit(title="Read", goal="many").goal)
        self.assertEqual(Habit(title="Read", goal="4").goal, 4)


class GoalNormalizationTests(unittest.TestCase):
    def test_values(self):
        self.assertEqual(normalize_goal(3), 3)
        self.assertEqual(normalize_goal(" 2 "), 2)
        for value in (None, 0, -1, "0", "-3", "", "abc", 2.5, True):
            self.assertIsNone(normalize_goal(value), value)


class DisplayMetadataTests(unittest.TestCase):
    def test_category_metadata(self):
        self.assertEqual(Category.HEALTH.icon, "heart.fill")
        self.assertEqual(Category.FITNESS.colors, ["FF9F43", "EE5A24"])
        self.assertTrue(all(len(c.colors) == 2 for c in Category))

    def test_weekday_names(self):
        self.assertEqual(Weekday.SUNDAY.short_name, "Sun")
        self.assertEqual(int(Weekday.SATURDAY), 7)
        self.assertIs(Weekday.from_label("wed"), Weekday.WEDNESDAY)
        self.assertIs(Weekday.from_label("Thursday"), Weekday.THURSDAY)
        with self.assertRaises(ValueError):
            Weekday.from_label("someday")

    def test_frequency_label(self):
        self.assertEqual(Frequency.CUSTOM.label, "Custom")


class SerializationTests(unittest.TestCase):
    def test_round_trip(self):
        habit = Habit(
            id="5d1c",
            title="Gym",
            description="Upper body",
            frequency=Frequency.CUSTOM,
            completed_dates=[at(2026, 2, 10, 7), at(2026, 2, 10, 7).replace(microsecond=1)],
            reminder_time=time(7, 30),
            created_at=at(2026, 1, 1, 9),
            goal=2,
            category=Category.FITNESS,
            selected_days=[Weekday.TUESDAY, Weekday.THURSDAY],
            icon="🏋️",
        )
        data = habit.to_dict()

        self.assertEqual(data["selected_days"], [3, 5])
        self.assertEqual(data["reminder_time"], "07:30:00")
        self.assertEqual(data["completed_dates"][0], "2026-02-10T07:00:00+00:00")
        self.assertEqual(Habit.from_dict(data), habit)

    def test_from_dict_tolerates_missing_optional_fields(self):
        habit = Habit.from_dict(
            {"id": "1", "title": "Walk", "completed_dates": ["2026-02-10T07:00:00Z", "garbage", 5]}
        )
        self.assertIs(habit.frequency, Frequency.DAILY)
        self.assertIsNone(habit.goal)
        self.assertEqual(habit.completed_dates, [at(2026, 2, 10, 7)])

    def test_from_dict_requires_title(self):
        with self.assertRaises(KeyError):
            Habit.from_dict({"id": "1"})
        with self.assertRaises(TypeError):
            Habit.from_dict(["not", "a", "habit"])

    def test_from_dict_rejects_non_string_id(self):
        with self.assertRaises(TypeError):
            Habit.from_dict({"id": 5, "title": "Walk"})
        self.assertIsNone(Habit.from_dict({"id": "", "title": "Walk"}).id)


if __name__ == "__main__":
    unittest.main()
