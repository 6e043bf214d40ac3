from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum, IntEnum
from typing import Any, Dict, Iterable, List, Optional, Set

from .dates import format_instant, instant_key, local_day, parse_instant

DEFAULT_ICON = "🎯"

_IMMUTABLE_FIELDS = ("id", "created_at")


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class Category(str, Enum):
    HEALTH = "health"
    PRODUCTIVITY = "productivity"
    LEARNING = "learning"
    MINDFULNESS = "mindfulness"
    FITNESS = "fitness"
    OTHER = "other"

    @property
    def icon(self) -> str:
        return _CATEGORY_ICONS[self]

    @property
    def colors(self) -> List[str]:
        return list(_CATEGORY_COLORS[self])


_CATEGORY_ICONS = {
    Category.HEALTH: "heart.fill",
    Category.PRODUCTIVITY: "briefcase.fill",
    Category.LEARNING: "book.fill",
    Category.MINDFULNESS: "brain.head.profile",
    Category.FITNESS: "figure.run",
    Category.OTHER: "star.fill",
}

_CATEGORY_COLORS = {
    Category.HEALTH: ("FF6B6B", "EE5253"),
    Category.PRODUCTIVITY: ("4834D4", "686DE0"),
    Category.LEARNING: ("22A699", "147D6F"),
    Category.MINDFULNESS: ("BE9FE1", "9B72CF"),
    Category.FITNESS: ("FF9F43", "EE5A24"),
    Category.OTHER: ("6366F1", "8B5CF6"),
}


class Weekday(IntEnum):
    SUNDAY = 1
    MONDAY = 2
    TUESDAY = 3
    WEDNESDAY = 4
    THURSDAY = 5
    FRIDAY = 6
    SATURDAY = 7

    @property
    def short_name(self) -> str:
        return self.name[:3].title()

    @classmethod
    def from_label(cls, label: str) -> "Weekday":
        key = label.strip()[:3].lower()
        for day in cls:
            if day.short_name.lower() == key:
                return day
        raise ValueError(f"Unknown weekday: {label!r}")


def normalize_goal(value: Any) -> Optional[int]:
    """Return a positive goal, or None for anything that is not one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return None
    if not isinstance(value, int):
        return None
    return value if value > 0 else None


@dataclass
class Habit:
    title: str
    description: str = ""
    frequency: Frequency = Frequency.DAILY
    completed_dates: List[datetime] = field(default_factory=list)
    reminder_time: Optional[time] = None
    created_at: Optional[datetime] = None
    goal: Optional[int] = None
    category: Category = Category.OTHER
    selected_days: Set[Weekday] = field(default_factory=set)
    icon: str = DEFAULT_ICON
    id: Optional[str] = None

    def __post_init__(self) -> None:
        self.completed_dates = sorted(self.completed_dates, key=instant_key)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _IMMUTABLE_FIELDS and self.__dict__.get(name) is not None:
            raise AttributeError(f"Habit.{name} cannot change once assigned")
        if name == "frequency":
            value = Frequency(value)
        elif name == "category":
            value = Category(value)
        elif name == "goal":
            value = normalize_goal(value)
        elif name == "selected_days":
            value = {Weekday(day) for day in value}
        super().__setattr__(name, value)
        if name in ("frequency", "selected_days"):
            self._clear_selected_days_unless_custom()

    def _clear_selected_days_unless_custom(self) -> None:
        frequency = self.__dict__.get("frequency")
        if frequency is None or "selected_days" not in self.__dict__:
            return
        if frequency != Frequency.CUSTOM and self.__dict__["selected_days"]:
            super().__setattr__("selected_days", set())

    def add_completion(self, instant: datetime) -> datetime:
        """Record one completion event and return the instant actually stored.

        Events must stay distinguishable, so an instant that is already
        recorded is nudged forward a microsecond at a time.
        """
        while instant in self.completed_dates:
            instant += timedelta(microseconds=1)
        self.completed_dates.append(instant)
        self.completed_dates.sort(key=instant_key)
        return instant

    def remove_completion(self, instant: datetime) -> bool:
        try:
            self.completed_dates.remove(instant)
        except ValueError:
            return False
        return True

    def remove_completions_on(self, day: date, tz: Optional[tzinfo] = None) -> int:
        kept = [d for d in self.completed_dates if local_day(d, tz) != day]
        removed = len(self.completed_dates) - len(kept)
        self.completed_dates[:] = kept
        return removed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "frequency": self.frequency.value,
            "completed_dates": [format_instant(d) for d in self.completed_dates],
            "reminder_time": self.reminder_time.isoformat() if self.reminder_time else None,
            "created_at": format_instant(self.created_at) if self.created_at else None,
            "goal": self.goal,
            "category": self.category.value,
            "selected_days": sorted(int(day) for day in self.selected_days),
            "icon": self.icon,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Habit":
        """Build a habit from its stored form.

        Raises ValueError, KeyError or TypeError when a required field is
        missing or unusable. Unparseable completion instants are dropped.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Habit entry must be an object, got {type(data).__name__}")
        title = data["title"]
        if not isinstance(title, str):
            raise TypeError("Habit title must be a string")
        habit_id = data.get("id") or None
        if habit_id is not None and not isinstance(habit_id, str):
            raise TypeError("Habit id must be a string")
        reminder = data.get("reminder_time")
        return cls(
            id=habit_id,
            title=title,
            description=data.get("description") or "",
            frequency=data.get("frequency") or Frequency.DAILY,
            completed_dates=_parse_instants(data.get("completed_dates")),
            reminder_time=time.fromisoformat(reminder) if reminder else None,
            created_at=parse_instant(data.get("created_at")),
            goal=data.get("goal"),
            category=data.get("category") or Category.OTHER,
            selected_days=data.get("selected_days") or [],
            icon=data.get("icon") or DEFAULT_ICON,
        )


def _parse_instants(raw: Optional[Iterable[Any]]) -> List[datetime]:
    if not isinstance(raw, list):
        return []
    parsed = (parse_instant(value) for value in raw)
    return [value for value in parsed if value is not None]
