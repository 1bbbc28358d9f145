# txt2ics/dates.py
from __future__ import annotations

import re
from datetime import date
from typing import Optional, Tuple

from .errors import InvalidDate, InvalidTime
from .models import ParserState

# -- Public API ---------------------------------------------------------------

__all__ = ["parse_date", "parse_time", "month_number"]

# -- Helpers ------------------------------------------------------------------

_MONTH_NAMES = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

# Every prefix of three letters or more maps to its month; no two English
# month names share one, so "sept", "octob" and "jun" all resolve.
_MONTHS = {
    name[:n]: number
    for number, name in enumerate(_MONTH_NAMES, start=1)
    for n in range(3, len(name) + 1)
}

# 04/09/2011, 4-9-2011
_MDY_RE = re.compile(r"^(?P<mon>\d{1,2})(?P<sep>[/-])(?P<day>\d{1,2})(?P=sep)(?P<year>\d{4})$")

# 2011/04/09, 2011-4-9
_YMD_RE = re.compile(r"^(?P<year>\d{4})(?P<sep>[/-])(?P<mon>\d{1,2})(?P=sep)(?P<day>\d{1,2})$")

# Apr-9-2011, april-09-2011
_NAME_DY_RE = re.compile(r"^(?P<mon>[A-Za-z]+)-(?P<day>\d{1,2})-(?P<year>\d{4})$")

# 5/31
_MD_RE = re.compile(r"^(?P<mon>\d{1,2})/(?P<day>\d{1,2})$")

# 2011-Apr-09
_Y_NAME_D_RE = re.compile(r"^(?P<year>\d{4})-(?P<mon>[A-Za-z]+)-(?P<day>\d{1,2})$")

# 11:30am, 9P, 12:05PM
_TIME_RE = re.compile(r"^(?P<h>\d{1,2})(?::(?P<m>\d{2}))?(?P<ampm>[ap])m?$", re.IGNORECASE)


def month_number(name: str) -> Optional[int]:
    return _MONTHS.get(name.lower())


def _resolve(token: str, m: re.Match, year: Optional[int] = None) -> Tuple[int, int, int]:
    mon = m.group("mon")
    if mon.isdigit():
        month = int(mon)
    else:
        month = month_number(mon)
        if month is None:
            raise InvalidDate(f"unknown month name {mon!r}", token)
    if year is None:
        year = int(m.group("year"))
    return year, month, int(m.group("day"))


def _match_date(token: str, state: ParserState) -> Tuple[int, int, int]:
    m = _MDY_RE.match(token)
    if m:
        return _resolve(token, m)
    m = _YMD_RE.match(token)
    if m:
        return _resolve(token, m)
    m = _NAME_DY_RE.match(token)
    if m:
        return _resolve(token, m)
    m = _MD_RE.match(token)
    if m:
        return _resolve(token, m, year=state.resolve_year())
    m = _Y_NAME_D_RE.match(token)
    if m:
        return _resolve(token, m)
    raise InvalidDate(f"unrecognized date {token!r}", token)


def parse_date(token: str, state: ParserState) -> date:
    """
    Parse a date token and remember its year for later `mm/dd` tokens.

    Accepted shapes, first match wins:
      04/09/2011, 04-09-2011
      2011/04/09, 2011-04-09
      Apr-9-2011
      4/9            (year carried from an earlier token, else this year)
      2011-Apr-9

    Out-of-range days are rejected rather than rolled into the next month.
    """
    year, month, day = _match_date(token, state)
    if not 1 <= month <= 12:
        raise InvalidDate(f"month out of range in {token!r}", token)
    try:
        parsed = date(year, month, day)
    except ValueError as e:
        raise InvalidDate(f"{e} in {token!r}", token) from e
    state.carried_year = parsed.year
    return parsed


def parse_time(token: str) -> Tuple[int, int]:
    """Parse a 12-hour clock token into a 24-hour (hour, minute) pair."""
    m = _TIME_RE.match(token)
    if not m:
        raise InvalidTime(f"unrecognized time {token!r}", token)
    h = int(m.group("h"))
    mnt = int(m.group("m") or 0)
    if not 1 <= h <= 12:
        raise InvalidTime(f"hour out of range in {token!r}", token)
    if mnt > 59:
        raise InvalidTime(f"minute out of range in {token!r}", token)
    ampm = m.group("ampm").lower()
    if ampm == "a" and h == 12:
        h = 0
    elif ampm == "p" and h != 12:
        h += 12
    return h, mnt
