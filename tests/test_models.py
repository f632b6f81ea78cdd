from datetime import date

import pytest

from webreg_ics.models import Day, MissingFieldError, Row, Session, SessionType, WeekdaySet


class TestDay:
    @pytest.mark.parametrize(
        "code, day",
        [
            ("M", Day.MONDAY),
            ("Tu", Day.TUESDAY),
            ("W", Day.WEDNESDAY),
            ("Th", Day.THURSDAY),
            ("F", Day.FRIDAY),
            ("Sa", Day.SATURDAY),
            ("Su", Day.SUNDAY),
        ],
    )
    def test_display_codes(self, code, day):
        assert Day.from_display_code(code) is day

    def test_not_a_day(self):
        assert Day.from_display_code("T") is None
        assert Day.from_display_code("Mo") is None
        assert Day.from_display_code("m") is None

    def test_recurrence_codes(self):
        assert [d.recurrence_code for d in Day] == ["MO", "TU", "WE", "TH", "FR", "SA", "SU"]

    def test_weekday_bijection(self):
        for d in Day:
            assert Day.from_weekday(d.weekday) is d
        # 2024-01-08 is a Monday
        assert date(2024, 1, 8).weekday() == Day.MONDAY.weekday

    def test_ordering(self):
        assert Day.MONDAY < Day.TUESDAY < Day.SUNDAY
        assert min([Day.FRIDAY, Day.WEDNESDAY, Day.SATURDAY]) is Day.WEDNESDAY


class TestSessionFromRow:
    def test_section_optional(self):
        row = Row(
            session_type=SessionType.FINAL,
            days=WeekdaySet(()),
            building="TBA",
            room="TBA",
        )
        session = Session.from_row(row)
        assert session.section is None
        assert session.timeslot is None

    def test_checks_session_type_first(self):
        with pytest.raises(MissingFieldError) as exc:
            Session.from_row(Row())
        assert exc.value.owner == "row"
        assert exc.value.field == "session type"
        assert str(exc.value) == "row has no session type"
