"""
Course / session model shared by the WebReg parser and the ICS exporter.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, time
from enum import Enum
from typing import Optional, Tuple, Union


class Day(Enum):
    """Weekday in calendar order, Monday first."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    def __lt__(self, other: "Day") -> bool:
        if not isinstance(other, Day):
            return NotImplemented
        return self.value < other.value

    @property
    def weekday(self) -> int:
        """Same index as ``date.weekday()`` (0 = Monday)."""
        return self.value

    @property
    def recurrence_code(self) -> str:
        return _RRULE_CODES[self]

    @classmethod
    def from_weekday(cls, index: int) -> "Day":
        return cls(index)

    @classmethod
    def from_display_code(cls, code: str) -> Optional["Day"]:
        """WebReg day token ('M', 'Tu', 'W', ...) → Day, None if not a token."""
        return _DISPLAY_CODES.get(code)


_DISPLAY_CODES = {
    "M": Day.MONDAY,
    "Tu": Day.TUESDAY,
    "W": Day.WEDNESDAY,
    "Th": Day.THURSDAY,
    "F": Day.FRIDAY,
    "Sa": Day.SATURDAY,
    "Su": Day.SUNDAY,
}

_RRULE_CODES = {
    Day.MONDAY: "MO",
    Day.TUESDAY: "TU",
    Day.WEDNESDAY: "WE",
    Day.THURSDAY: "TH",
    Day.FRIDAY: "FR",
    Day.SATURDAY: "SA",
    Day.SUNDAY: "SU",
}


class SessionType(Enum):
    LECTURE = "Lecture"
    DISCUSSION = "Discussion"
    FINAL = "Final"
    LAB = "Lab"
    MIDTERM = "Midterm"
    TUTORIAL = "Tutorial"
    SEMINAR = "Seminar"

    @classmethod
    def from_code(cls, code: str) -> Optional["SessionType"]:
        return _SESSION_CODES.get(code)


_SESSION_CODES = {
    "LE": SessionType.LECTURE,
    "DI": SessionType.DISCUSSION,
    "FI": SessionType.FINAL,
    "LA": SessionType.LAB,
    "MI": SessionType.MIDTERM,
    "TU": SessionType.TUTORIAL,
    "SE": SessionType.SEMINAR,
}


@dataclass(frozen=True)
class Timeslot:
    start: time
    end: time


@dataclass(frozen=True)
class ExplicitDate:
    """A meeting tied to one calendar date (finals, midterms)."""

    date: date


@dataclass(frozen=True)
class WeekdaySet:
    """A weekly meeting; days keep column order and may be empty."""

    days: Tuple[Day, ...] = ()


Days = Union[ExplicitDate, WeekdaySet]


class MissingFieldError(ValueError):
    """A required course or session field was absent in the table."""

    def __init__(self, owner: str, field: str) -> None:
        self.owner = owner
        self.field = field
        super().__init__(f"{owner} has no {field}")


@dataclass(frozen=True)
class Row:
    """One parsed table row; course-level fields only on a course's first row."""

    code: Optional[str] = None
    title: Optional[str] = None
    section: Optional[str] = None
    session_type: Optional[SessionType] = None
    instructor: Optional[str] = None
    units: Optional[int] = None
    days: Optional[Days] = None
    timeslot: Optional[Timeslot] = None
    building: Optional[str] = None
    room: Optional[str] = None


@dataclass(frozen=True)
class Session:
    section: Optional[str]
    session_type: SessionType
    days: Days
    timeslot: Optional[Timeslot]
    building: str
    room: str

    @classmethod
    def from_row(cls, row: Row) -> "Session":
        if row.session_type is None:
            raise MissingFieldError("row", "session type")
        if row.days is None:
            raise MissingFieldError("row", "days")
        if row.building is None:
            raise MissingFieldError("row", "building")
        if row.room is None:
            raise MissingFieldError("row", "room")
        return cls(
            section=row.section,
            session_type=row.session_type,
            days=row.days,
            timeslot=row.timeslot,
            building=row.building,
            room=row.room,
        )


@dataclass(frozen=True)
class Course:
    code: str
    title: str
    instructor: str
    units: int
    uid: uuid.UUID
    sessions: Tuple[Session, ...]
    start_date: date
    end_date: date
