import logging
import os
from dataclasses import dataclass
from datetime import tzinfo
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .dates import DEFAULT_WEEK_START, WEEK_START_OPTIONS
from .errors import ConfigError

DEFAULT_DATA_PATH = "~/.habit-ledger.json"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class Settings:
    data_path: str
    week_start: str = DEFAULT_WEEK_START
    tz: Optional[tzinfo] = None
    log_level: str = "WARNING"


def _parse_week_start(value: str) -> str:
    label = value.strip().lower()[:3]
    if label not in WEEK_START_OPTIONS:
        raise ConfigError(f"Week start must be one of {', '.join(WEEK_START_OPTIONS)}, got {value!r}")
    return label


def _parse_tz(value: Optional[str]) -> Optional[tzinfo]:
    if not value:
        return None
    try:
        return ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"Unknown time zone {value!r}") from exc


def _parse_log_level(value: str) -> str:
    level = value.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"Unknown log level {value!r}")
    return level


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        data_path=os.path.expanduser(env.get("HABIT_LEDGER_PATH", DEFAULT_DATA_PATH)),
        week_start=_parse_week_start(env.get("HABIT_LEDGER_WEEK_START", DEFAULT_WEEK_START)),
        tz=_parse_tz(env.get("HABIT_LEDGER_TZ")),
        log_level=_parse_log_level(env.get("HABIT_LEDGER_LOG_LEVEL", "WARNING")),
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
