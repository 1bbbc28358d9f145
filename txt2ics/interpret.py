# txt2ics/interpret.py
"""
Line interpreter: one raw input line plus the running ParserState in,
one LineResult out.

    >Practice at Hollow Park        directive, sets the description
    04/09/2011 11:30am 1hr 15min Jenna's soccer
    4/9/2011 - - 15min No school    all-day (time and duration both "-")
    4/16                            continuation of the last full line

Nothing here touches files or output; the pipeline feeds lines in and
collects events and diagnostics.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Optional

import pytz

from .dates import parse_date, parse_time
from .durations import parse_duration
from .errors import ConversionError, InvalidDate, InvalidDuration, InvalidTime, MalformedLine
from .models import (
    ALL_DAY_MINUTES,
    Diagnostic,
    Event,
    FullSpec,
    LineCategory,
    LineResult,
    ParserState,
)

NO_VALUE = "-"

_DIRECTIVE_RE = re.compile(r"^\s*>(?P<text>.*)$")
_FULL_RE = re.compile(
    r"^\s*(?P<date>\S+)\s+(?P<time>\S+)\s+(?P<duration>\S+)\s+(?P<reminder>\S+)\s+(?P<subject>\S.*?)\s*$"
)


def _check_instants(event: Event, spec: FullSpec, date_token: str) -> None:
    """Make sure the event can be placed on the clock before it reaches the builder."""
    if event.all_day:
        try:
            event.end_date()
        except OverflowError as e:
            raise InvalidDate(f"no day after {date_token!r}", date_token) from e
        return
    try:
        event.start_instant()
    except OverflowError as e:
        raise InvalidDate(f"{date_token!r} is out of range", date_token) from e
    except pytz.NonExistentTimeError as e:
        raise InvalidTime(f"{spec.time!r} is skipped by the clock change on {date_token}", spec.time) from e
    try:
        event.end_instant()
    except OverflowError as e:
        raise InvalidDuration(f"{spec.duration!r} runs past the end of the calendar",
                              spec.duration, field="duration") from e


def build_event(day: date, spec: FullSpec, description: Optional[str], date_token: Optional[str] = None) -> Event:
    """Validate the non-date fields of a line against an already parsed date."""
    if spec.time == NO_VALUE and spec.duration == NO_VALUE:
        event = Event(
            year=day.year, month=day.month, day=day.day,
            subject=spec.subject,
            all_day=True,
            duration_minutes=ALL_DAY_MINUTES,
        )
    else:
        hour, minute = parse_time(spec.time)
        event = Event(
            year=day.year, month=day.month, day=day.day,
            subject=spec.subject,
            hour=hour, minute=minute,
            duration_minutes=parse_duration(spec.duration, field="duration"),
        )
    _check_instants(event, spec, date_token or day.isoformat())
    if spec.reminder != NO_VALUE:
        event.reminder_minutes = parse_duration(spec.reminder, field="reminder")
    event.description = description
    return event


def _diagnose(err: ConversionError, raw: str, source: str, line_no: Optional[int]) -> Diagnostic:
    return Diagnostic(
        source=source,
        line=line_no,
        field=err.field,
        text=err.text,
        raw=raw,
        message=str(err),
    )


def _interpret(line: str, state: ParserState) -> LineResult:
    m = _DIRECTIVE_RE.match(line)
    if m:
        state.current_description = m.group("text").strip() or None
        return LineResult(LineCategory.DIRECTIVE)

    m = _FULL_RE.match(line)
    if m:
        day = parse_date(m.group("date"), state)
        spec = FullSpec(
            time=m.group("time"),
            duration=m.group("duration"),
            reminder=m.group("reminder"),
            subject=m.group("subject"),
        )
        event = build_event(day, spec, state.current_description, m.group("date"))
        state.last_full_spec = spec
        return LineResult(LineCategory.FULL_SPEC, event=event)

    token = line.strip()
    if state.last_full_spec is not None:
        try:
            day = parse_date(token, state)
        except InvalidDate as e:
            raise MalformedLine("line matches no known shape", token) from e
        event = build_event(day, state.last_full_spec, state.current_description, token)
        return LineResult(LineCategory.CONTINUATION, event=event)

    raise MalformedLine("line matches no known shape", token)


def interpret_line(
    raw: str,
    state: ParserState,
    source: str = "<input>",
    line_no: Optional[int] = None,
) -> LineResult:
    """
    Classify and parse one line, updating `state` in place.

    Field failures never raise out of here: they come back as a
    LineResult carrying a Diagnostic, with `state.error_flag` set.
    """
    line = raw.rstrip("\r\n")
    if not line.strip():
        return LineResult(LineCategory.BLANK)

    try:
        result = _interpret(line, state)
    except MalformedLine as e:
        state.error_flag = True
        diag = _diagnose(e, line, source, line_no)
        logging.debug("%s:%s: %s", source, line_no, e)
        return LineResult(LineCategory.MALFORMED, diagnostic=diag)
    except ConversionError as e:
        state.error_flag = True
        diag = _diagnose(e, line, source, line_no)
        logging.debug("%s:%s: %s", source, line_no, e)
        category = LineCategory.CONTINUATION if _FULL_RE.match(line) is None else LineCategory.FULL_SPEC
        return LineResult(category, diagnostic=diag)

    if result.event is not None:
        logging.debug("%s:%s: %s event on %04d-%02d-%02d", source, line_no,
                      result.category.value, result.event.year, result.event.month, result.event.day)
    return result
