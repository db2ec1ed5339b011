"""
Temporal Normalizer — relative phrases and explicit date/time params to
absolute values.

Resolution order for a target timestamp:
  1. `datetime` param (ISO 8601)
  2. `date` + `time`
  3. `date` alone, at the default time
  4. relative phrase in `when`
  5. tomorrow at the default time, when a time is required
"""

import re
from datetime import date, datetime, time, timedelta
from typing import Callable, Mapping, Optional

from directive_kernel.errors import ParamValidationError

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"

# Offsets in days from today
RELATIVE_DAYS = {
    "today": 0,
    "היום": 0,
    "tomorrow": 1,
    "מחר": 1,
    "day after tomorrow": 2,
    "מחרתיים": 2,
}

_DAY_FIRST = re.compile(r"^(\d{1,2})[/.](\d{1,2})[/.](\d{4})$")
_TIME = re.compile(r"^(\d{1,2})(?::(\d{2}))?$")


def format_timestamp(value: datetime) -> str:
    return value.strftime(TIMESTAMP_FORMAT)


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


class TemporalNormalizer:
    """Converts directive date/time params using an injectable clock."""

    def __init__(
        self,
        now: Optional[Callable[[], datetime]] = None,
        default_hour: int = 9,
        default_minute: int = 0,
    ):
        self._now = now or datetime.now
        self.default_time = time(default_hour, default_minute)

    def today(self) -> date:
        return self._now().date()

    def relative_offset(self, phrase: str) -> Optional[int]:
        """Day offset for a known relative phrase, else None."""
        return RELATIVE_DAYS.get(" ".join(phrase.strip().lower().split()))

    def resolve_date(self, value: str) -> date:
        """Relative phrase, ISO date or day-first date to a date."""
        text = (value or "").strip()
        if not text:
            raise ParamValidationError("Empty date")

        offset = self.relative_offset(text)
        if offset is not None:
            return self.today() + timedelta(days=offset)

        m = _DAY_FIRST.match(text)
        try:
            if m:
                day, month, year = (int(g) for g in m.groups())
                return date(year, month, day)
            return date.fromisoformat(text[:10])
        except ValueError:
            raise ParamValidationError(f"Unrecognised date '{value}'")

    def resolve_time(self, value: str) -> time:
        m = _TIME.match((value or "").strip())
        if not m:
            raise ParamValidationError(f"Unrecognised time '{value}'")
        hour, minute = int(m.group(1)), int(m.group(2) or 0)
        if hour > 23 or minute > 59:
            raise ParamValidationError(f"Unrecognised time '{value}'")
        return time(hour, minute)

    def resolve_datetime(
        self, params: Mapping[str, Optional[str]], required: bool = True
    ) -> Optional[datetime]:
        """Build a target timestamp from `datetime`/`date`/`time`/`when` params."""
        explicit = params.get("datetime")
        if explicit:
            try:
                parsed = datetime.fromisoformat(explicit.strip())
            except ValueError:
                raise ParamValidationError(f"Unrecognised datetime '{explicit}'")
            if parsed.tzinfo is not None:
                # Stored timestamps are naive local time
                parsed = parsed.astimezone().replace(tzinfo=None)
            return parsed

        day = params.get("date")
        clock = params.get("time")
        if day:
            at = self.resolve_time(clock) if clock else self.default_time
            return datetime.combine(self.resolve_date(day), at)

        when = params.get("when")
        if when:
            offset = self.relative_offset(when)
            if offset is None:
                raise ParamValidationError(f"Unrecognised relative date '{when}'")
            at = self.resolve_time(clock) if clock else self.default_time
            return datetime.combine(self.today() + timedelta(days=offset), at)

        if not required and not clock:
            return None
        at = self.resolve_time(clock) if clock else self.default_time
        return datetime.combine(self.today() + timedelta(days=1), at)
