"""Helpers around epoch-millisecond timestamps and HH:MM durations."""

import re
import time
import uuid
from datetime import date, datetime, timedelta
from typing import Optional, Union

from dateutil.parser import ParserError, parse as parse_date

from planner.core.errors import ValidationError

DateInput = Union[int, float, str, datetime, date, None]
DurationInput = Union[int, str, None]

_HHMM = re.compile(r"^\s*(\d{1,3}):([0-5]\d)\s*$")


def generate_id() -> str:
    return uuid.uuid4().hex


def now_ms() -> int:
    return int(time.time() * 1000)


def to_epoch_ms(dt: datetime) -> int:
    # datetime naïf = heure locale
    return int(dt.timestamp() * 1000)


def from_epoch_ms(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000)


def start_of_day(now: datetime) -> datetime:
    # datetime avec fuseau: ramené à l'heure locale naïve
    if now.tzinfo is not None:
        now = now.astimezone().replace(tzinfo=None)
    return datetime.combine(now.date(), datetime.min.time())


def day_bounds(now: datetime, days: int = 1) -> tuple:
    """Retourne (début du jour de now, début du jour + days) en epoch ms."""
    start = start_of_day(now)
    return to_epoch_ms(start), to_epoch_ms(start + timedelta(days=days))


def parse_timestamp(value: DateInput, field: str = "date") -> Optional[int]:
    """Normalise une date reçue (epoch ms, ISO-8601, datetime) en epoch ms."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field}: {value!r}")
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, datetime):
        return to_epoch_ms(value)
    if isinstance(value, date):
        return to_epoch_ms(datetime.combine(value, datetime.min.time()))
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            return to_epoch_ms(parse_date(value))
        except (ParserError, ValueError, OverflowError):
            raise ValidationError(f"Invalid {field}: {value!r}")
    raise ValidationError(f"Invalid {field}: {value!r}")


def parse_minutes(value: DurationInput, field: str = "estimate") -> Optional[int]:
    """'HH:MM' -> hours*60 + minutes. Les entiers sont déjà des minutes."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field}: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ValidationError(f"Invalid {field}: {value!r}")
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        match = _HHMM.match(value)
        if not match:
            raise ValidationError(f"Invalid {field}: expected HH:MM, got {value!r}")
        hours, minutes = int(match.group(1)), int(match.group(2))
        return hours * 60 + minutes
    raise ValidationError(f"Invalid {field}: {value!r}")


def format_minutes(minutes: Optional[int]) -> Optional[str]:
    if minutes is None:
        return None
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
