import argparse
import logging
import sys
from datetime import time
from typing import List, Optional

from .completion import is_completed_today, today_completion_count
from .config import Settings, configure_logging, load_settings
from .dates import WEEK_START_OPTIONS, format_date, today_local, window_dates
from .errors import HabitLedgerError, PersistenceError
from .manager import HabitCollection
from .models import Category, Frequency, Habit, Weekday, normalize_goal
from .stats import (
    completion_rate,
    completions_by_weekday,
    habit_summary,
    monthly_progress,
    week_progress,
)
from .store import JSONHabitStore
from .streaks import current_streak, longest_streak

logger = logging.getLogger(__name__)


def _short_id(habit: Habit) -> str:
    return (habit.id or "")[:8]


def _resolve(collection: HabitCollection, ref: str) -> Optional[Habit]:
    matches = [h for h in collection.habits if h.id and h.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        print(f"Habit {ref} not found.")
    else:
        print(f"Habit id {ref} is ambiguous ({len(matches)} matches).")
    return None


def _parse_days(value: Optional[str]) -> List[Weekday]:
    if not value:
        return []
    return [Weekday.from_label(part) for part in value.split(",") if part.strip()]


def _parse_reminder(value: Optional[str]) -> Optional[time]:
    if not value:
        return None
    return time.fromisoformat(value)


def _goal_label(habit: Habit, count: int) -> str:
    if habit.goal is None:
        return "✓" if count else "·"
    return f"{count}/{habit.goal}"


def cmd_add(collection: HabitCollection, args: argparse.Namespace) -> int:
    habit = Habit(
        title=args.title.strip(),
        description=args.description or "",
        frequency=Frequency(args.frequency),
        goal=normalize_goal(args.goal),
        category=Category(args.category),
        selected_days=_parse_days(args.days),
        reminder_time=_parse_reminder(args.reminder),
        icon=args.icon,
    )
    if args.days and habit.frequency != Frequency.CUSTOM:
        print("Selected days only apply to custom habits; ignoring --days.")
    habit = collection.add(habit)
    print(f"Added habit {_short_id(habit)}: {habit.icon} {habit.title}")
    return 0


def cmd_list(collection: HabitCollection, args: argparse.Namespace) -> int:
    habits = collection.habits
    if not habits:
        print("No habits yet.")
        return 0
    tz = args.settings.tz
    for habit in habits:
        status = "✓" if is_completed_today(habit, tz=tz) else "·"
        count = today_completion_count(habit, tz=tz)
        streak = current_streak(habit, tz=tz, week_start=args.settings.week_start)
        print(
            f"{_short_id(habit)} {status} {habit.icon} {habit.title} "
            f"({habit.frequency.label}, today {_goal_label(habit, count)}, "
            f"streak {streak.count} {streak.unit}(s))"
        )
    return 0


def cmd_edit(collection: HabitCollection, args: argparse.Namespace) -> int:
    habit = _resolve(collection, args.id)
    if habit is None:
        return 1
    if args.title is not None:
        habit.title = args.title.strip()
    if args.description is not None:
        habit.description = args.description
    if args.frequency is not None:
        habit.frequency = Frequency(args.frequency)
    if args.days is not None:
        habit.selected_days = _parse_days(args.days)
    if args.clear_goal:
        habit.goal = None
    elif args.goal is not None:
        habit.goal = normalize_goal(args.goal)
    if args.category is not None:
        habit.category = Category(args.category)
    if args.icon is not None:
        habit.icon = args.icon
    if args.reminder is not None:
        habit.reminder_time = _parse_reminder(args.reminder)
    collection.update(habit)
    print(f"Updated habit {_short_id(habit)}: {habit.title}")
    return 0


def cmd_delete(collection: HabitCollection, args: argparse.Namespace) -> int:
    habit = _resolve(collection, args.id)
    if habit is None:
        return 1
    collection.delete(habit)
    print(f"Deleted habit {_short_id(habit)}.")
    return 0


def cmd_toggle(collection: HabitCollection, args: argparse.Namespace) -> int:
    habit = _resolve(collection, args.id)
    if habit is None:
        return 1
    before = collection.today_completion_count(habit)
    updated = collection.toggle_completion(habit)
    after = collection.today_completion_count(updated)
    if after == before:
        print(f"Goal already met for {habit.title} today ({_goal_label(updated, after)}).")
    else:
        print(f"{habit.title}: today {_goal_label(updated, after)}")
    return 0


def cmd_undo(collection: HabitCollection, args: argparse.Namespace) -> int:
    habit = _resolve(collection, args.id)
    if habit is None:
        return 1
    if collection.today_completion_count(habit) == 0:
        print(f"No completions to undo for {habit.title} today.")
        return 0
    updated = collection.decrement_completion(habit)
    print(f"{habit.title}: today {_goal_label(updated, collection.today_completion_count(updated))}")
    return 0


def cmd_streak(collection: HabitCollection, args: argparse.Namespace) -> int:
    habit = _resolve(collection, args.id)
    if habit is None:
        return 1
    if not habit.completed_dates:
        print("No completions yet.")
        return 0
    settings: Settings = args.settings
    streak = current_streak(habit, tz=settings.tz, week_start=settings.week_start)
    print(f"Current streak: {streak.count} {streak.unit}(s)")
    print(f"Longest streak: {longest_streak(habit, settings.tz)} day(s)")
    print(f"Total completions: {len(habit.completed_dates)}")
    return 0


def cmd_stats(collection: HabitCollection, args: argparse.Namespace) -> int:
    habit = _resolve(collection, args.id)
    if habit is None:
        return 1
    if args.days <= 0:
        print("Days must be at least 1.")
        return 1
    tz = args.settings.tz
    rate = completion_rate(habit, args.days, tz=tz)
    print(f"{habit.icon} {habit.title} [{habit.category.value}]")
    print(f"Completion rate ({args.days} days): {rate * 100:.0f}%")
    print(f"Longest streak: {longest_streak(habit, tz)} day(s)")
    print(f"Total completions: {len(habit.completed_dates)}")
    print("Weekly pattern:")
    counts = completions_by_weekday(habit, tz)
    for code, count in counts.items():
        print(f"  {Weekday(code).short_name} {count}")
    print("Monthly progress:")
    for entry in monthly_progress(habit, tz=tz):
        print(f"  {entry.month.strftime('%Y-%m')} {entry.completion * 100:.0f}%")
    return 0


def cmd_report(collection: HabitCollection, args: argparse.Namespace) -> int:
    habits = collection.habits
    if not habits:
        print("No habits yet.")
        return 0
    if args.days <= 0:
        print("Days must be at least 1.")
        return 1
    settings: Settings = args.settings
    end_date = today_local(settings.tz)
    window = window_dates(end_date, args.days)
    print(f"Report window: {format_date(window[0])} → {format_date(window[-1])} ({args.days} days)")
    for habit in habits:
        row = habit_summary(habit, end_date, settings.tz, settings.week_start, args.days)
        last = format_date(row["last_date"]) if row["last_date"] else "-"
        print(
            f"{_short_id(habit)} {habit.title} | "
            f"{row['rate'] * 100:.0f}% | "
            f"current {row['current']} {row['unit']}(s) | "
            f"best {row['longest']} | "
            f"last {last}"
        )
    return 0


def cmd_week(collection: HabitCollection, args: argparse.Namespace) -> int:
    habit = _resolve(collection, args.id)
    if habit is None:
        return 1
    settings: Settings = args.settings
    print(f"Week view ({settings.week_start} start): {habit.title}")
    for day, done in week_progress(habit, tz=settings.tz, week_start=settings.week_start):
        mark = "✓" if done else "·"
        print(f"{format_date(day)} {day.strftime('%a')} {mark}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Local-first habit tracker")
    parser.add_argument("--data", help="Path to the habit JSON file")
    parser.add_argument("--week-start", choices=WEEK_START_OPTIONS, help="First day of the week")
    sub = parser.add_subparsers(dest="command", required=True)

    frequencies = [f.value for f in Frequency]
    categories = [c.value for c in Category]

    add = sub.add_parser("add", help="Add a new habit")
    add.add_argument("title", help="Habit title")
    add.add_argument("--description", help="Longer description")
    add.add_argument("--frequency", choices=frequencies, default=Frequency.DAILY.value)
    add.add_argument("--days", help="Days for custom habits (e.g. mon,wed,fri)")
    add.add_argument("--goal", help="Completions needed per day")
    add.add_argument("--category", choices=categories, default=Category.OTHER.value)
    add.add_argument("--icon", default="🎯", help="Display icon")
    add.add_argument("--reminder", help="Reminder time (HH:MM)")
    add.set_defaults(func=cmd_add)

    list_cmd = sub.add_parser("list", help="List habits")
    list_cmd.set_defaults(func=cmd_list)

    edit = sub.add_parser("edit", help="Edit a habit")
    edit.add_argument("id", help="Habit id or unique prefix")
    edit.add_argument("--title", help="New title")
    edit.add_argument("--description", help="New description")
    edit.add_argument("--frequency", choices=frequencies)
    edit.add_argument("--days", help="Days for custom habits (e.g. mon,wed,fri)")
    edit.add_argument("--goal", help="Completions needed per day")
    edit.add_argument("--clear-goal", action="store_true", help="Remove the goal")
    edit.add_argument("--category", choices=categories)
    edit.add_argument("--icon", help="Display icon")
    edit.add_argument("--reminder", help="Reminder time (HH:MM), empty to clear")
    edit.set_defaults(func=cmd_edit)

    delete = sub.add_parser("delete", help="Delete a habit")
    delete.add_argument("id", help="Habit id or unique prefix")
    delete.set_defaults(func=cmd_delete)

    toggle = sub.add_parser("toggle", help="Toggle or count up today's completion")
    toggle.add_argument("id", help="Habit id or unique prefix")
    toggle.set_defaults(func=cmd_toggle)

    undo = sub.add_parser("undo", help="Remove today's most recent completion")
    undo.add_argument("id", help="Habit id or unique prefix")
    undo.set_defaults(func=cmd_undo)

    streak = sub.add_parser("streak", help="Show streak stats for a habit")
    streak.add_argument("id", help="Habit id or unique prefix")
    streak.set_defaults(func=cmd_streak)

    stats = sub.add_parser("stats", help="Show statistics for a habit")
    stats.add_argument("id", help="Habit id or unique prefix")
    stats.add_argument("--days", type=int, default=30, help="Completion rate window")
    stats.set_defaults(func=cmd_stats)

    report = sub.add_parser("report", help="Summary of all habits")
    report.add_argument("--days", type=int, default=7, help="Number of days to include")
    report.set_defaults(func=cmd_report)

    week = sub.add_parser("week", help="Show this week's completions for a habit")
    week.add_argument("id", help="Habit id or unique prefix")
    week.set_defaults(func=cmd_week)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = load_settings()
    except HabitLedgerError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1
    if args.data:
        settings.data_path = args.data
    if args.week_start:
        settings.week_start = args.week_start
    configure_logging(settings)
    args.settings = settings

    logger.debug("Using habit file %s", settings.data_path)
    collection = HabitCollection(JSONHabitStore(settings.data_path), tz=settings.tz)
    try:
        return args.func(collection, args)
    except PersistenceError as exc:
        print(f"Warning: changes were not saved: {exc}", file=sys.stderr)
        return 2
    except ValueError as exc:
        print(f"Invalid input: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
