# txt2ics/durations.py
from __future__ import annotations

import re
from decimal import Decimal

from .errors import InvalidDuration

_UNIT_MINUTES = {
    "m": 1, "min": 1, "mins": 1,
    "h": 60, "hr": 60, "hrs": 60,
    "d": 1440, "day": 1440, "days": 1440,
}

_DURATION_RE = re.compile(
    r"^(?P<num>\d+(?:\.\d*)?|\.\d+)(?P<unit>mins|min|m|hrs|hr|h|days|day|d)$",
    re.IGNORECASE,
)


def parse_duration(token: str, field: str = "duration") -> int:
    """
    Parse "90m", "1.5hrs", "2days" or the bare "0" into whole minutes.

    Fractions are truncated; Decimal keeps "4.35h" at 261 instead of 260.
    `field` tags the error so the same grammar serves the reminder column.
    """
    if token == "0":
        return 0
    m = _DURATION_RE.match(token)
    if not m:
        raise InvalidDuration(f"unrecognized {field} {token!r}", token, field=field)
    minutes = Decimal(m.group("num")) * _UNIT_MINUTES[m.group("unit").lower()]
    return int(minutes)
