# txt2ics/models.py
from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Dict, Optional

import pytz

LOCAL_TZNAME = "America/New_York"
LOCAL_TZ = pytz.timezone(LOCAL_TZNAME)

ALL_DAY_MINUTES = 1440


class LineCategory(Enum):
    BLANK = "blank"
    DIRECTIVE = "directive"
    FULL_SPEC = "full"
    CONTINUATION = "continuation"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class FullSpec:
    """The reusable part of a five-field line (everything but the date)."""
    time: str
    duration: str
    reminder: str
    subject: str


@dataclass
class ParserState:
    default_year: int
    carried_year: Optional[int] = None
    last_full_spec: Optional[FullSpec] = None
    current_description: Optional[str] = None
    error_flag: bool = False

    def resolve_year(self) -> int:
        return self.carried_year if self.carried_year is not None else self.default_year


@dataclass
class Event:
    year: int
    month: int
    day: int
    subject: str
    all_day: bool = False
    hour: int = 0
    minute: int = 0
    duration_minutes: int = 0
    reminder_minutes: Optional[int] = None
    description: Optional[str] = None

    @property
    def day_date(self) -> date:
        return date(self.year, self.month, self.day)

    def start_instant(self, tz: pytz.BaseTzInfo = LOCAL_TZ) -> datetime:
        """Localized start; wall times skipped by a spring-forward raise NonExistentTimeError."""
        naive = datetime(self.year, self.month, self.day, self.hour, self.minute, 0)
        try:
            return tz.localize(naive, is_dst=None)
        except pytz.AmbiguousTimeError:
            # fall-back repeats an hour; take the standard-time one
            return tz.localize(naive, is_dst=False)

    def end_instant(self, tz: pytz.BaseTzInfo = LOCAL_TZ) -> datetime:
        start = self.start_instant(tz)
        return tz.normalize(start + timedelta(minutes=self.duration_minutes))

    def end_date(self) -> date:
        """Exclusive end date for all-day stamps, by calendar arithmetic."""
        naive = datetime(self.year, self.month, self.day) + timedelta(minutes=self.duration_minutes)
        return naive.date()


@dataclass
class Diagnostic:
    source: str
    line: Optional[int]
    field: str
    text: str
    raw: str = ""
    message: str = ""

    def format(self) -> str:
        where = f"{self.source}:{self.line}" if self.line is not None else self.source
        if self.field == "file":
            return f"{where}: cannot read file: {self.message}"
        if self.field == "line":
            return f"{where}: malformed line: {self.raw}"
        return f"{where}: invalid {self.field} '{self.text}': {self.raw}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class LineResult:
    category: LineCategory
    event: Optional[Event] = None
    diagnostic: Optional[Diagnostic] = None
