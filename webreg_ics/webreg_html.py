"""
Parse a UCSD WebReg list-view page (saved from the browser) into courses.

Usage pattern:
- Log in to WebReg, pick a term and stay in the list view.
- Save the page with "Save As → Webpage, Complete" (or fetch it with
  ``webreg_fetch``).
- This module reads ``table#list-id-table`` and groups its rows into
  courses, each owning its lectures, discussions, labs and exams.

The real table structure (one <tr> per meeting, 11+ <td> columns):

    | Subject Course | Title | Section Code | Type | Instructor | Grade Option
    | Units | Days | Time | BLDG | Room | ...

Only the first row of a course's block carries Subject Course / Title /
Instructor / Units; the rows below it (discussions, finals, ...) leave those
cells empty. "Expand:" rows are UI toggles that duplicate other rows.
"""
from __future__ import annotations

import logging
import re
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Callable, List

from bs4 import BeautifulSoup, Tag  # type: ignore[import]

from .models import (
    Course,
    Day,
    Days,
    ExplicitDate,
    MissingFieldError,
    Row,
    Session,
    SessionType,
    Timeslot,
    WeekdaySet,
)

log = logging.getLogger(__name__)

TABLE_ID = "list-id-table"
EXPAND_MARKER = "Expand:"

# Column positions in the list view
COL_CODE = 0
COL_TITLE = 1
COL_SECTION = 2
COL_TYPE = 3
COL_INSTRUCTOR = 4
COL_UNITS = 6
COL_DAYS = 7
COL_TIME = 8
COL_BUILDING = 9
COL_ROOM = 10
MIN_COLUMNS = 11


# ──────────────────────────────────────────────────────────────────
#  Cell helpers
# ──────────────────────────────────────────────────────────────────

def _optional_text(cell: str) -> str | None:
    """Trim, collapse repeated spaces and decode '&amp;'. Empty → None."""
    text = cell.strip()
    if not text:
        return None
    return re.sub(r" {2,}", " ", text).replace("&amp;", "&")


def _strip_anchor(cell: str) -> str | None:
    """
    Reduce '<a href="...">Smith, John</a>' to 'Smith, John'.
    'TBA' and other text without markup pass through unchanged.
    Only a blank cell is None; an anchor with no text gives ''.
    """
    html = cell.strip()
    if not html:
        return None
    if ">" in html:
        html = html.split(">", 1)[1].split("<", 1)[0]
    return re.sub(r" {2,}", " ", html.strip()).replace("&amp;", "&")


def parse_session_type(text: str) -> SessionType | None:
    return SessionType.from_code(text.strip())


def parse_units(text: str) -> int | None:
    """'4.00' → 4. Anything that is not a number → None."""
    try:
        return int(float(text.strip()))
    except (ValueError, OverflowError):
        return None


def parse_days(text: str) -> Days | None:
    """
    Parse the Days column.

    - 'Sa 03/16/2024' (exam rows) → ExplicitDate(2024-03-16)
    - 'MWF' → WeekdaySet((MONDAY, WEDNESDAY, FRIDAY)), 'TuTh' → (TUESDAY, THURSDAY)

    Unrecognized characters are dropped, so 'TBA' gives an empty WeekdaySet.
    A date that does not parse gives None.
    """
    text = text.strip()
    if "/" in text:
        _, _, date_part = text.partition(" ")
        try:
            return ExplicitDate(datetime.strptime(date_part.strip(), "%m/%d/%Y").date())
        except ValueError:
            return None

    days: List[Day] = []
    buf = ""
    for ch in text:
        buf += ch
        day = Day.from_display_code(buf)
        if day is not None:
            days.append(day)
            buf = ""
    return WeekdaySet(tuple(days))


def parse_timeslot(text: str) -> Timeslot | None:
    """'9:00a-9:50a' → Timeslot(09:00, 09:50). No partial results."""
    start, sep, end = text.strip().partition("-")
    if not sep:
        return None
    try:
        return Timeslot(
            start=datetime.strptime(start.strip() + "m", "%I:%M%p").time(),
            end=datetime.strptime(end.strip() + "m", "%I:%M%p").time(),
        )
    except ValueError:
        return None


def parse_row(cells: List[str]) -> Row | None:
    """
    Turn one row's cell HTML (in column order) into a Row.
    Returns None for "Expand:" toggle rows.
    """
    if any(EXPAND_MARKER in cell for cell in cells):
        return None

    return Row(
        code=_optional_text(cells[COL_CODE]),
        title=_optional_text(cells[COL_TITLE]),
        section=_optional_text(cells[COL_SECTION]),
        session_type=parse_session_type(cells[COL_TYPE]),
        instructor=_strip_anchor(cells[COL_INSTRUCTOR]),
        units=parse_units(cells[COL_UNITS]),
        days=parse_days(cells[COL_DAYS]),
        timeslot=parse_timeslot(cells[COL_TIME]),
        building=_strip_anchor(cells[COL_BUILDING]),
        room=_strip_anchor(cells[COL_ROOM]),
    )


# ──────────────────────────────────────────────────────────────────
#  Grouping rows into courses
# ──────────────────────────────────────────────────────────────────

def _finish_course(
    row: Row,
    sessions: List[Session],
    start_date: date,
    end_date: date,
    uid: uuid.UUID,
) -> Course:
    if row.title is None:
        raise MissingFieldError("course", "title")
    if row.instructor is None:
        raise MissingFieldError("course", "instructor")
    if row.units is None:
        raise MissingFieldError("course", "units")
    return Course(
        code=row.code,
        title=row.title,
        instructor=row.instructor,
        units=row.units,
        uid=uid,
        sessions=tuple(sessions),
        start_date=start_date,
        end_date=end_date,
    )


def courses_from_rows(
    rows: List[Row],
    start_date: date,
    end_date: date,
    uid_factory: Callable[[], uuid.UUID] = uuid.uuid4,
) -> List[Course]:
    """
    Group rows (document order) into courses.

    Walks the rows bottom-up: every row becomes a session, and a row that
    carries a course code closes the course with all sessions collected
    since the previous one. Sessions above the first course row belong to
    no course and are dropped.

    Raises MissingFieldError on the first absent required field; nothing
    is returned in that case.
    """
    courses: List[Course] = []
    pending: List[Session] = []

    for row in reversed(rows):
        pending.append(Session.from_row(row))
        if row.code is not None:
            pending.reverse()
            courses.append(
                _finish_course(row, pending, start_date, end_date, uid_factory())
            )
            pending = []

    if pending:
        log.debug("Dropping %d session row(s) with no course row", len(pending))

    courses.reverse()
    return courses


# ──────────────────────────────────────────────────────────────────
#  Public API
# ──────────────────────────────────────────────────────────────────

def _as_date(value: date | str) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def _body_rows(table: Tag) -> List[Tag]:
    rows = table.select(":scope > tbody > tr")
    if not rows:
        rows = table.find_all("tr", recursive=False)
    return rows


def extract_rows(html: str) -> List[Row]:
    """Parse every data row of #list-id-table (header row skipped)."""
    soup = BeautifulSoup(html, "html.parser")
    table = soup.find("table", id=TABLE_ID)
    if table is None:
        raise ValueError(
            f"Could not find the #{TABLE_ID} table in the HTML.\n"
            "Save the WebReg page while in list view (use 'Save As → Complete Webpage')."
        )

    rows: List[Row] = []
    for idx, tr in enumerate(_body_rows(table)[1:], start=1):
        cells = [td.decode_contents() for td in tr.find_all("td")]
        if len(cells) < MIN_COLUMNS:
            log.debug("Skipping row %d: %d cell(s)", idx, len(cells))
            continue
        row = parse_row(cells)
        if row is None:
            log.debug("Skipping row %d: expand toggle", idx)
            continue
        rows.append(row)
    return rows


def parse_webreg_html(
    html_path: str | Path | None = None,
    html_content: str | None = None,
    *,
    start_date: date | str,
    end_date: date | str,
) -> List[Course]:
    """
    Parse a saved WebReg list-view page.

    :param html_path: Path to the saved HTML file.
    :param html_content: Raw HTML string (alternative to html_path).
    :param start_date: First day of the term (date or YYYY-MM-DD).
    :param end_date: Last day of the term (date or YYYY-MM-DD), used as RRULE UNTIL.
    :returns: Courses in table order.
    """
    if html_content is not None:
        html = html_content
    elif html_path is not None:
        html = Path(html_path).read_text(encoding="utf-8", errors="replace")
    else:
        raise ValueError("Provide either html_path or html_content.")

    rows = extract_rows(html)
    courses = courses_from_rows(rows, _as_date(start_date), _as_date(end_date))
    log.debug("Parsed %d row(s) into %d course(s)", len(rows), len(courses))
    return courses
