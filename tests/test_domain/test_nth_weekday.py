"""Tests for nth-weekday resolution"""
from datetime import date

from eventcal.domain.nth_weekday import (
    nth_weekday_of_month, occurrence_of_weekday_in_month, WeekdayPosition,
)

SUN, MON, TUE, WED, THU, FRI, SAT = range(7)


class TestNthWeekdayOfMonth:
    def test_fourth_thursday_of_november(self):
        assert nth_weekday_of_month(2024, 10, THU, 4) == date(2024, 11, 28)
        assert nth_weekday_of_month(2025, 10, THU, 4) == date(2025, 11, 27)

    def test_first_weekday_on_the_first(self):
        assert nth_weekday_of_month(2024, 0, MON, 1) == date(2024, 1, 1)

    def test_fifth_occurrence_exists(self):
        assert nth_weekday_of_month(2024, 1, THU, 5) == date(2024, 2, 29)

    def test_fifth_occurrence_missing(self):
        assert nth_weekday_of_month(2023, 1, THU, 5) is None
        assert nth_weekday_of_month(2024, 1, MON, 5) is None

    def test_last_weekday(self):
        assert nth_weekday_of_month(2024, 4, MON, "last") == date(2024, 5, 27)
        assert nth_weekday_of_month(2024, 1, MON, "last") == date(2024, 2, 26)

    def test_last_weekday_on_last_day_of_year(self):
        assert nth_weekday_of_month(2024, 11, TUE, "last") == date(2024, 12, 31)

    def test_invalid_weekday(self):
        assert nth_weekday_of_month(2024, 0, 7, 1) is None
        assert nth_weekday_of_month(2024, 0, -1, "last") is None

    def test_non_positive_n(self):
        assert nth_weekday_of_month(2024, 0, MON, 0) is None

    def test_final_month_of_calendar(self):
        assert nth_weekday_of_month(9999, 11, FRI, 5) == date(9999, 12, 31)
        assert nth_weekday_of_month(9999, 11, FRI, "last") == date(9999, 12, 31)
        assert nth_weekday_of_month(9999, 11, SAT, 5) is None


class TestOccurrenceOfWeekdayInMonth:
    def test_fourth_and_last(self):
        assert occurrence_of_weekday_in_month(date(2024, 11, 28)) == WeekdayPosition(4, THU, True)

    def test_first_not_last(self):
        assert occurrence_of_weekday_in_month(date(2024, 1, 2)) == WeekdayPosition(1, TUE, False)

    def test_third_not_last(self):
        assert occurrence_of_weekday_in_month(date(2024, 11, 21)) == WeekdayPosition(3, THU, False)

    def test_last_day_of_calendar(self):
        assert occurrence_of_weekday_in_month(date(9999, 12, 31)) == WeekdayPosition(5, FRI, True)

    def test_fifth_is_always_last(self):
        pos = occurrence_of_weekday_in_month(date(2024, 1, 29))
        assert pos.n == 5
        assert pos.weekday == MON
        assert pos.is_last is True

    def test_round_trip_through_resolver(self):
        d = date(2024, 3, 12)  # 2nd Tuesday
        pos = occurrence_of_weekday_in_month(d)
        assert nth_weekday_of_month(d.year, d.month - 1, pos.weekday, pos.n) == d
