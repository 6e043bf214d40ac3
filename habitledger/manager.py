import copy
import logging
import threading
import uuid
from datetime import datetime, tzinfo
from typing import Callable, Iterator, List, Optional, Union

from .completion import completions_on, count_on, is_date_completed
from .dates import instant_key, local_day, now_local
from .models import Habit
from .store import HabitStore

logger = logging.getLogger(__name__)

HabitRef = Union[Habit, str]


def _habit_id(habit: HabitRef) -> Optional[str]:
    if isinstance(habit, Habit):
        return habit.id
    return habit


class HabitCollection:
    """Owns the ordered habit list and persists it after every mutation.

    Callers only ever see copies. Mutations that target an unknown id are
    no-ops returning None. A failed save raises PersistenceError once the
    in-memory change has been applied, so the session state stays correct.
    """

    def __init__(
        self,
        store: HabitStore,
        clock: Optional[Callable[[], datetime]] = None,
        tz: Optional[tzinfo] = None,
    ):
        self.store = store
        self.tz = tz
        self._clock = clock or (lambda: now_local(tz))
        self._lock = threading.RLock()
        loaded = store.load()
        self._habits: List[Habit] = loaded if loaded is not None else []

    @property
    def habits(self) -> List[Habit]:
        with self._lock:
            return copy.deepcopy(self._habits)

    def __len__(self) -> int:
        with self._lock:
            return len(self._habits)

    def __iter__(self) -> Iterator[Habit]:
        return iter(self.habits)

    def get(self, habit: HabitRef) -> Optional[Habit]:
        with self._lock:
            stored = self._find(_habit_id(habit))
            return copy.deepcopy(stored) if stored is not None else None

    def add(self, habit: Habit) -> Habit:
        with self._lock:
            new = copy.deepcopy(habit)
            if new.id is None:
                new.id = str(uuid.uuid4())
            elif self._find(new.id) is not None:
                raise ValueError(f"Habit {new.id} already exists")
            if new.created_at is None:
                new.created_at = self._clock()
            self._habits.append(new)
            logger.debug("Added habit %s (%s)", new.id, new.title)
            self._persist()
            return copy.deepcopy(new)

    def update(self, habit: Habit) -> Optional[Habit]:
        with self._lock:
            index = self._index(habit.id)
            if index is None:
                return None
            new = copy.deepcopy(habit)
            # created_at is fixed when the habit is added
            new.__dict__["created_at"] = self._habits[index].created_at
            new.completed_dates = sorted(new.completed_dates, key=instant_key)
            self._habits[index] = new
            logger.debug("Updated habit %s", new.id)
            self._persist()
            return copy.deepcopy(new)

    def delete(self, habit: HabitRef) -> bool:
        with self._lock:
            index = self._index(_habit_id(habit))
            if index is None:
                return False
            removed = self._habits.pop(index)
            logger.debug("Deleted habit %s", removed.id)
            self._persist()
            return True

    def toggle_completion(self, habit: HabitRef) -> Optional[Habit]:
        """Record or clear today's completion on the stored copy of ``habit``.

        With a goal each toggle adds one event until the goal is reached,
        after which toggling does nothing. Without a goal a completed day is
        cleared entirely and an open day gets one event.
        """
        with self._lock:
            stored = self._find(_habit_id(habit))
            if stored is None:
                return None
            now = self._clock()
            today = local_day(now, self.tz)
            if stored.goal is not None:
                if count_on(stored, today, self.tz) >= stored.goal:
                    return copy.deepcopy(stored)
                stored.add_completion(now)
            elif is_date_completed(stored, today, self.tz):
                removed = stored.remove_completions_on(today, self.tz)
                logger.debug("Cleared %d completion(s) of %s for %s", removed, stored.id, today)
            else:
                stored.add_completion(now)
            self._persist()
            return copy.deepcopy(stored)

    def decrement_completion(self, habit: HabitRef) -> Optional[Habit]:
        with self._lock:
            stored = self._find(_habit_id(habit))
            if stored is None:
                return None
            today = local_day(self._clock(), self.tz)
            todays = completions_on(stored, today, self.tz)
            if not todays:
                return copy.deepcopy(stored)
            stored.remove_completion(todays[-1])
            self._persist()
            return copy.deepcopy(stored)

    def today_completion_count(self, habit: HabitRef) -> int:
        with self._lock:
            stored = self._find(_habit_id(habit))
            if stored is None and isinstance(habit, Habit):
                stored = habit
            if stored is None:
                return 0
            return count_on(stored, self._clock(), self.tz)

    def _find(self, habit_id: Optional[str]) -> Optional[Habit]:
        index = self._index(habit_id)
        return self._habits[index] if index is not None else None

    def _index(self, habit_id: Optional[str]) -> Optional[int]:
        if habit_id is None:
            return None
        for index, item in enumerate(self._habits):
            if item.id == habit_id:
                return index
        return None

    def _persist(self) -> None:
        self.store.save(self._habits)
