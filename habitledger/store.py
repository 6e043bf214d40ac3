import json
import logging
import os
from typing import Any, Dict, List, Optional, Protocol

from .errors import PersistenceError
from .models import Habit

SAVE_KEY = "saved_habits"

logger = logging.getLogger(__name__)


class HabitStore(Protocol):
    def load(self) -> Optional[List[Habit]]:
        ...

    def save(self, habits: List[Habit]) -> None:
        ...


def dump_habits(habits: List[Habit]) -> Dict[str, Any]:
    return {SAVE_KEY: [habit.to_dict() for habit in habits]}


def parse_habits(data: Any) -> Optional[List[Habit]]:
    """Rebuild habits from a stored document, or None if it is unusable."""
    if not isinstance(data, dict) or not isinstance(data.get(SAVE_KEY), list):
        logger.warning("Stored habits have an unexpected shape; starting empty")
        return None
    habits = []
    for index, entry in enumerate(data[SAVE_KEY]):
        try:
            habits.append(Habit.from_dict(entry))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping stored habit #%d: %s", index, exc)
    return habits


class JSONHabitStore:
    def __init__(self, path: str):
        self.path = os.path.expanduser(path)

    def load(self) -> Optional[List[Habit]]:
        if not os.path.exists(self.path):
            logger.debug("No habit file at %s", self.path)
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read habits from %s: %s", self.path, exc)
            return None
        habits = parse_habits(data)
        if habits is not None:
            logger.debug("Loaded %d habit(s) from %s", len(habits), self.path)
        return habits

    def save(self, habits: List[Habit]) -> None:
        tmp = self.path + ".tmp"
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(dump_habits(habits), f, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Could not save habits to %s: %s", self.path, exc)
            raise PersistenceError(f"Could not save habits to {self.path}: {exc}") from exc
        logger.debug("Saved %d habit(s) to %s", len(habits), self.path)


class MemoryHabitStore:
    """Keeps the last saved snapshot as a JSON string.

    ``saves`` counts the snapshots written so far, so callers can tell
    whether an operation reached the store.
    """

    def __init__(self, payload: Optional[str] = None):
        self.payload = payload
        self.saves = 0

    def load(self) -> Optional[List[Habit]]:
        if self.payload is None:
            return None
        try:
            data = json.loads(self.payload)
        except ValueError as exc:
            logger.warning("Could not decode stored habits: %s", exc)
            return None
        return parse_habits(data)

    def save(self, habits: List[Habit]) -> None:
        try:
            self.payload = json.dumps(dump_habits(habits), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"Could not encode habits: {exc}") from exc
        self.saves += 1
