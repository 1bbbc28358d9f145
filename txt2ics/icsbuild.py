# txt2ics/icsbuild.py
from __future__ import annotations

import hashlib
from datetime import datetime
from typing import List

import pytz
from icalendar import vDate, vDatetime, vText

from .models import LOCAL_TZ, Event


def ical_utc(dt: datetime) -> str:
    return vDatetime(dt.astimezone(pytz.utc)).to_ical().decode("ascii")


def ical_text(s: str) -> str:
    return vText(s).to_ical().decode("utf-8")


def make_uid(lines: List[str]) -> str:
    base = "".join(line + "\n" for line in lines)
    return hashlib.md5(base.encode("utf-8")).hexdigest()


class EventBuilder:
    """
    Render Events as VEVENT fragments.

    One builder serves a whole run: `run_started` is stamped into
    CREATED, LAST-MODIFIED and DTSTAMP of every fragment, and feeds the
    UID hash along with everything else.
    """

    def __init__(self, run_started: datetime, tz: pytz.BaseTzInfo = LOCAL_TZ):
        self.stamp = ical_utc(run_started)
        self.tz = tz

    def lines(self, event: Event) -> List[str]:
        head = [
            "BEGIN:VEVENT",
            f"CREATED:{self.stamp}",
            f"LAST-MODIFIED:{self.stamp}",
            f"DTSTAMP:{self.stamp}",
        ]
        body = [f"SUMMARY:{ical_text(event.subject)}"]
        if event.description is not None:
            body.append(f"DESCRIPTION:{ical_text(event.description)}")

        if event.all_day:
            body.append(f"DTSTART;VALUE=DATE:{vDate(event.day_date).to_ical().decode('ascii')}")
            body.append(f"DTEND;VALUE=DATE:{vDate(event.end_date()).to_ical().decode('ascii')}")
        else:
            body.append(f"DTSTART:{ical_utc(event.start_instant(self.tz))}")
            body.append(f"DTEND:{ical_utc(event.end_instant(self.tz))}")

        if event.reminder_minutes is not None:
            body.extend([
                "BEGIN:VALARM",
                "ACTION:DISPLAY",
                f"TRIGGER;VALUE=DURATION:-PT{event.reminder_minutes}M",
                "END:VALARM",
            ])
        body.append("END:VEVENT")

        uid = make_uid(head + body)
        return head + [f"UID:{uid}"] + body

    def build(self, event: Event) -> str:
        """Fragment text, LF-terminated lines."""
        return "".join(line + "\n" for line in self.lines(event))
