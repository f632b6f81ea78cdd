"""
Export parsed WebReg courses to iCalendar (.ics).

Weekly meetings become one event with a weekly RRULE; dated meetings
(finals, midterms) become a single event.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional

import icalendar
import pytz

from .models import Course, Day, ExplicitDate, Session, WeekdaySet

# UCSD is on Pacific time
TZ_PACIFIC = "America/Los_Angeles"

PRODID = "-//WebReg to ICS//webreg-ics//EN"
CALENDAR_NAME = "WebReg Courses"


def first_date_for_weekday(start: date, day: Day) -> date:
    """First date on/after start that falls on day."""
    offset = (day.weekday - start.weekday()) % 7
    return start + timedelta(days=offset)


def anchor_date(session: Session, course: Course) -> date:
    """Date of the session's first (or only) meeting."""
    days = session.days
    if isinstance(days, ExplicitDate):
        return days.date
    if isinstance(days, WeekdaySet):
        earliest = min(days.days, default=Day.MONDAY)
        return first_date_for_weekday(course.start_date, earliest)
    raise TypeError(f"Unknown days value: {days!r}")


def _weekly_rule(days: WeekdaySet, until: date) -> icalendar.vRecur:
    return icalendar.vRecur(
        {
            "FREQ": "WEEKLY",
            "WKST": "SU",
            "UNTIL": until,
            "BYDAY": [day.recurrence_code for day in days.days],
        }
    )


def _description(course: Course, session: Session) -> str:
    lines = [course.title, f"Instructor: {course.instructor}"]
    if session.section:
        lines.append(f"Section: {session.section}")
    return "\n".join(lines)


def session_event(
    course: Course,
    index: int,
    session: Session,
    *,
    tz: str = TZ_PACIFIC,
    now: Optional[datetime] = None,
    single_day_fallback: bool = False,
) -> icalendar.Event | None:
    """
    Build the VEVENT for one session, or None if it has no timeslot.

    :param index: Position of the session within its course (UID suffix).
    :param tz: Olson time zone name attached to DTSTART/DTEND.
    :param now: DTSTAMP value. Defaults to the current UTC time.
    :param single_day_fallback: Emit no RRULE for an empty weekday set
        instead of a weekly rule with an empty BYDAY.
    """
    if session.timeslot is None:
        return None

    local_tz = pytz.timezone(tz)
    day = anchor_date(session, course)
    start = local_tz.localize(datetime.combine(day, session.timeslot.start))
    end = local_tz.localize(datetime.combine(day, session.timeslot.end))

    event = icalendar.Event()
    event.add("uid", f"{course.uid}-{index}")
    event.add("dtstamp", now if now is not None else datetime.now(timezone.utc))
    event.add("dtstart", start)
    event.add("dtend", end)
    event.add("summary", f"{course.code} {session.session_type.value}")
    event.add("location", f"{session.building} {session.room}")
    event.add("description", _description(course, session))
    # Show as busy in Google Calendar
    event.add("transp", "OPAQUE")

    days = session.days
    if isinstance(days, WeekdaySet):
        if days.days or not single_day_fallback:
            event.add("rrule", _weekly_rule(days, course.end_date))

    return event


def course_events(
    course: Course,
    *,
    tz: str = TZ_PACIFIC,
    now: Optional[datetime] = None,
    single_day_fallback: bool = False,
) -> List[icalendar.Event]:
    """Events for every session of course that has a timeslot."""
    events = []
    for index, session in enumerate(course.sessions):
        event = session_event(
            course,
            index,
            session,
            tz=tz,
            now=now,
            single_day_fallback=single_day_fallback,
        )
        if event is not None:
            events.append(event)
    return events


def build_calendar(
    courses: List[Course],
    *,
    tz: str = TZ_PACIFIC,
    now: Optional[datetime] = None,
    single_day_fallback: bool = False,
) -> icalendar.Calendar:
    cal = icalendar.Calendar()
    cal.add("prodid", PRODID)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("x-wr-calname", CALENDAR_NAME)
    cal.add("x-wr-timezone", tz)

    for course in courses:
        for event in course_events(
            course, tz=tz, now=now, single_day_fallback=single_day_fallback
        ):
            cal.add_component(event)
    return cal


def to_ical(courses: List[Course], **kwargs) -> bytes:
    """Serialized calendar; kwargs as for build_calendar."""
    return build_calendar(courses, **kwargs).to_ical()


def export_ics(courses: List[Course], out_path: str | Path, **kwargs) -> None:
    """Export courses to an iCalendar (.ics) file for Apple/Google calendar."""
    Path(out_path).write_bytes(to_ical(courses, **kwargs))
