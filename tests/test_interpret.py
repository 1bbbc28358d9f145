from txt2ics.interpret import interpret_line
from txt2ics.models import FullSpec, LineCategory, ParserState


def run(lines, state):
    return [interpret_line(line, state, source="events.txt", line_no=n) for n, line in enumerate(lines, start=1)]


def test_timed_event_with_reminder(state):
    result = interpret_line("04/09/2011 11:30am 1hr 15min Jenna's soccer\n", state)
    assert result.category is LineCategory.FULL_SPEC
    assert result.diagnostic is None
    ev = result.event
    assert (ev.year, ev.month, ev.day, ev.hour, ev.minute) == (2011, 4, 9, 11, 30)
    assert ev.duration_minutes == 60
    assert ev.reminder_minutes == 15
    assert ev.subject == "Jenna's soccer"
    assert not ev.all_day
    assert state.last_full_spec == FullSpec("11:30am", "1hr", "15min", "Jenna's soccer")


def test_all_day_event(state):
    ev = interpret_line("4/9/2011 - - 15min No school", state).event
    assert ev.all_day
    assert (ev.hour, ev.minute) == (0, 0)
    assert ev.duration_minutes == 1440
    assert ev.reminder_minutes == 15


def test_dash_reminder_means_none(state):
    ev = interpret_line("4/9/2011 9am 0 - Quick call", state).event
    assert ev.reminder_minutes is None
    assert ev.duration_minutes == 0


def test_subject_keeps_inner_spaces_and_drops_trailing(state):
    ev = interpret_line("  2011-04-09   9am  1hr  -   Team   lunch, again  \r\n", state).event
    assert ev.subject == "Team   lunch, again"


def test_continuation_reuses_last_full_line(state):
    results = run(["5/24/2012 9am 1hr 15min Status", "5/31", "6/7"], state)
    assert [r.category for r in results] == [
        LineCategory.FULL_SPEC, LineCategory.CONTINUATION, LineCategory.CONTINUATION,
    ]
    days = [(r.event.month, r.event.day) for r in results]
    assert days == [(5, 24), (5, 31), (6, 7)]
    for r in results:
        assert (r.event.year, r.event.hour, r.event.minute) == (2012, 9, 0)
        assert r.event.duration_minutes == 60
        assert r.event.reminder_minutes == 15
        assert r.event.subject == "Status"


def test_continuation_follows_the_newest_full_line(state):
    results = run([
        "1/3/2013 9am 1hr - First",
        "1/10",
        "1/4/2013 2pm 30min 5min Second",
        "1/11",
    ], state)
    assert results[1].event.subject == "First"
    assert results[3].event.subject == "Second"
    assert results[3].event.hour == 14
    assert state.last_full_spec.subject == "Second"


def test_continuation_does_not_replace_last_full_line(state):
    run(["1/3/2013 9am 1hr - First", "2013-Jan-10"], state)
    assert state.last_full_spec == FullSpec("9am", "1hr", "-", "First")
    assert state.carried_year == 2013


def test_date_only_line_without_prior_full_line_is_malformed(state):
    result = interpret_line("5/31", state, source="a.txt", line_no=4)
    assert result.category is LineCategory.MALFORMED
    assert result.event is None
    assert result.diagnostic.field == "line"
    assert result.diagnostic.line == 4
    assert result.diagnostic.source == "a.txt"
    assert state.error_flag


def test_short_lines_are_malformed(state):
    run(["5/24/2012 9am 1hr 15min Status"], state)
    for line in ("5/31 10am", "5/31 10am 1hr", "5/31 10am 1hr 15min", "not a date"):
        result = interpret_line(line, state)
        assert result.category is LineCategory.MALFORMED, line
        assert result.diagnostic.format().startswith("<input>: malformed line")


def test_blank_lines_change_nothing():
    state = ParserState(default_year=2012)
    for line in ("", "\n", "   \t \n"):
        result = interpret_line(line, state)
        assert result.category is LineCategory.BLANK
        assert result.event is None and result.diagnostic is None
    assert state == ParserState(default_year=2012)


def test_directive_sets_description_for_following_events(state):
    results = run([
        "> Practice at Hollow Park",
        "4/9/2011 9am 1hr - Soccer",
        "4/16",
        ">Bring snacks",
        "4/23/2011 9am 1hr - Soccer",
        ">",
        "4/30/2011 9am 1hr - Soccer",
    ], state)
    assert results[0].category is LineCategory.DIRECTIVE
    assert results[1].event.description == "Practice at Hollow Park"
    assert results[2].event.description == "Practice at Hollow Park"
    assert results[4].event.description == "Bring snacks"
    assert results[6].event.description is None
    assert not state.error_flag


def test_field_errors_name_the_field(state):
    cases = {
        "13/45/2020 - - - x": "date",
        "4/9/2011 25pm 1hr - x": "time",
        "4/9/2011 9am 1week - x": "duration",
        "4/9/2011 9am 1hr soon x": "reminder",
        "4/9/2011 - 1hr - x": "time",
        "4/9/2011 9am - - x": "duration",
    }
    for line, field in cases.items():
        result = interpret_line(line, state, source="f.txt", line_no=7)
        assert result.event is None, line
        assert result.diagnostic.field == field, line
        assert result.diagnostic.raw == line
        assert result.diagnostic.format().startswith(f"f.txt:7: invalid {field} "), line
    assert state.error_flag


def test_errors_are_sticky_and_processing_continues(state):
    results = run(["13/45/2020 - - - x", "4/9/2011 9am 1hr - ok", "", "4/10"], state)
    assert results[0].diagnostic is not None
    assert results[1].event.subject == "ok"
    assert results[3].event.day == 10
    assert state.error_flag


def test_failed_full_line_keeps_previous_full_line(state):
    run(["4/9/2011 9am 1hr - Good", "4/10/2011 9am 1hr soon Bad"], state)
    assert state.last_full_spec.subject == "Good"
    assert interpret_line("4/11", state).event.subject == "Good"


def test_events_past_the_calendar_end_are_line_errors(state):
    cases = {
        "12/31/9999 - - - Last day": ("date", "12/31/9999"),
        "12/31/9999 11pm 1hr - Too late": ("date", "12/31/9999"),
        "4/9/2011 9am 3000000d - Forever": ("duration", "3000000d"),
        "4/9/2011 9am 9999999999d - Longer": ("duration", "9999999999d"),
    }
    for line, (field, text) in cases.items():
        result = interpret_line(line, state, source="f.txt", line_no=3)
        assert result.event is None, line
        assert (result.diagnostic.field, result.diagnostic.text) == (field, text), line
    assert state.error_flag


def test_time_skipped_by_spring_forward_is_rejected(state):
    result = interpret_line("2012-Mar-11 2:30am 1hr - gap", state)
    assert result.event is None
    assert result.diagnostic.field == "time"
    assert result.diagnostic.text == "2:30am"
    assert state.last_full_spec is None


def test_continuation_onto_skipped_time_is_rejected(state):
    run(["3/4/2012 2:30am 1hr - Early", "3/11", "3/18"], state)
    result = interpret_line("3/11", state, line_no=9)
    assert result.category is LineCategory.CONTINUATION
    assert result.diagnostic.field == "time"
    assert interpret_line("3/18", state).event.day == 18


def test_repeated_fall_back_hour_is_accepted(state):
    ev = interpret_line("2011-Nov-06 1:30am 2hrs - Night shift", state).event
    assert (ev.hour, ev.minute) == (1, 30)
    assert ev.start_instant().utcoffset().total_seconds() == -5 * 3600
