#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Convert plain-text event lists into one iCalendar document.

Usage:
  txt2ics events.txt more.txt > calendar.ics
  python -m txt2ics.main --out build/calendar.ics --report build/report.json events.txt

Each non-blank line is "date time duration reminder subject", a bare date
repeating the last full line, or ">text" setting the description of the
events that follow. Any bad line withholds the whole calendar.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import pytz
from dateutil import parser as dateparse

from .config import load_config
from .errors import ConfigError, FileUnreadable
from .icsbuild import EventBuilder
from .interpret import interpret_line
from .models import LOCAL_TZ, Diagnostic, ParserState
from .render import DEFAULT_PRODID, DocumentAssembler

STDIN = "-"

# ---------------------------------
# Input
# ---------------------------------

def read_lines(source: str) -> Iterator[Tuple[int, str]]:
    """Yield (line number, text) for one input; FileUnreadable on failure."""
    try:
        if source == STDIN:
            for n, line in enumerate(sys.stdin, start=1):
                yield n, line
            return
        with open(source, "r", encoding="utf-8") as f:
            for n, line in enumerate(f, start=1):
                yield n, line
    except (OSError, UnicodeDecodeError) as e:
        raise FileUnreadable(str(e), source) from e


# ---------------------------------
# Conversion
# ---------------------------------

@dataclass
class RunResult:
    document: Optional[str]
    event_count: int
    diagnostics: List[Diagnostic] = field(default_factory=list)
    ok: bool = True


def run_clock(timestamp: Optional[str] = None) -> datetime:
    """The single run-start instant, optionally pinned from an ISO string."""
    if not timestamp:
        return datetime.now(tz=pytz.utc)
    dt = dateparse.isoparse(timestamp)
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc)


def convert(
    sources: Iterable[str],
    now: datetime,
    prodid: Optional[str] = None,
    calendar_name: Optional[str] = None,
) -> RunResult:
    state = ParserState(default_year=now.astimezone(LOCAL_TZ).year)
    builder = EventBuilder(now)
    assembler = DocumentAssembler(prodid or DEFAULT_PRODID, calendar_name)
    diagnostics: List[Diagnostic] = []

    for source in sources:
        logging.info("reading %s", source)
        try:
            for line_no, raw in read_lines(source):
                result = interpret_line(raw, state, source=source, line_no=line_no)
                if result.diagnostic is not None:
                    diagnostics.append(result.diagnostic)
                elif result.event is not None:
                    assembler.add(builder.build(result.event))
        except FileUnreadable as e:
            state.error_flag = True
            diagnostics.append(Diagnostic(
                source=source, line=None, field=e.field, text=e.text, message=str(e),
            ))

    if state.error_flag:
        return RunResult(None, len(assembler), diagnostics, ok=False)
    return RunResult(assembler.render(), len(assembler), diagnostics, ok=True)


# ---------------------------------
# Output
# ---------------------------------

def write_document(document: str, out: Optional[str]) -> None:
    data = document.encode("utf-8")
    if not out or out == STDIN:
        sys.stdout.buffer.write(data)
        sys.stdout.flush()
        return
    out_path = Path(out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(data)


def build_report(result: RunResult, sources: Sequence[str], now: datetime) -> Dict[str, Any]:
    return {
        "when": now.isoformat(),
        "files": list(sources),
        "total_events": result.event_count,
        "errors": len(result.diagnostics),
        "diagnostics": [d.to_dict() for d in result.diagnostics],
    }


def write_report(report: Dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)


# ---------------------------------
# CLI
# ---------------------------------

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="txt2ics", description="Convert text event lists into a single ICS.")
    ap.add_argument("files", nargs="+", help="Input text files ('-' for stdin).")
    ap.add_argument("--config", type=Path, default=None, help="Optional YAML config.")
    ap.add_argument("--out", default=None, help="Output ICS file (default: stdout).")
    ap.add_argument("--report", default=None, help="Write a JSON diagnostics report here.")
    ap.add_argument("--prodid", default=None, help="PRODID for the calendar header.")
    ap.add_argument("--calendar-name", default=None, help="X-WR-CALNAME for the calendar header.")
    ap.add_argument("--timestamp", default=None,
                    help="Pin the run clock (ISO 8601) for reproducible stamps and UIDs.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr.")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(
            args.config,
            out=args.out,
            report=args.report,
            prodid=args.prodid,
            calendar_name=args.calendar_name,
        )
        now = run_clock(args.timestamp)
    except (ConfigError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    result = convert(args.files, now, prodid=config["prodid"], calendar_name=config["calendar_name"])

    for diag in result.diagnostics:
        print(diag.format(), file=sys.stderr)

    if config["report"]:
        write_report(build_report(result, args.files, now), Path(config["report"]))

    if not result.ok:
        print(f"{result.event_count} events converted, {len(result.diagnostics)} errors; no calendar written",
              file=sys.stderr)
        return 1

    write_document(result.document, config["out"])
    print(f"{result.event_count} events converted", file=sys.stderr)
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    sys.exit(main())
