# txt2ics/render.py
"""
Calendar document assembly: fixed header and New York VTIMEZONE, one
fragment per event, footer, CRLF line endings.
"""

from __future__ import annotations

from typing import List, Optional

from .models import LOCAL_TZNAME

DEFAULT_PRODID = "-//txt2ics//Text to iCalendar//EN"

VTIMEZONE = """BEGIN:VTIMEZONE
TZID:America/New_York
X-LIC-LOCATION:America/New_York
BEGIN:DAYLIGHT
TZOFFSETFROM:-0500
TZOFFSETTO:-0400
TZNAME:EDT
DTSTART:19700308T020000
RRULE:FREQ=YEARLY;BYMONTH=3;BYDAY=2SU
END:DAYLIGHT
BEGIN:STANDARD
TZOFFSETFROM:-0400
TZOFFSETTO:-0500
TZNAME:EST
DTSTART:19701101T020000
RRULE:FREQ=YEARLY;BYMONTH=11;BYDAY=1SU
END:STANDARD
END:VTIMEZONE
"""

FOOTER = "END:VCALENDAR\n"


def to_crlf(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\n", "\r\n")


class DocumentAssembler:
    def __init__(self, prodid: str = DEFAULT_PRODID, calendar_name: Optional[str] = None):
        self.prodid = prodid
        self.calendar_name = calendar_name
        self.fragments: List[str] = []

    def __len__(self) -> int:
        return len(self.fragments)

    def add(self, fragment: str) -> None:
        self.fragments.append(fragment)

    def header(self) -> str:
        lines = [
            "BEGIN:VCALENDAR",
            f"PRODID:{self.prodid}",
            "VERSION:2.0",
        ]
        if self.calendar_name:
            lines.append(f"X-WR-CALNAME:{self.calendar_name}")
        lines.append(f"X-WR-TIMEZONE:{LOCAL_TZNAME}")
        return "\n".join(lines) + "\n" + VTIMEZONE

    def render(self) -> str:
        """The whole document with CRLF line endings."""
        parts = [self.header()]
        for fragment in self.fragments:
            parts.append("\n")
            parts.append(fragment)
        parts.append(FOOTER)
        return to_crlf("".join(parts))
