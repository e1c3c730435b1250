from datetime import date, datetime, timedelta, timezone

import pytest

from ledger.date import end_of_month, format_date, is_future, parse_date, today


def test_parse_plain_date():
    assert parse_date("2021-03-04") == date(2021, 3, 4)


def test_parse_empty_is_today():
    assert parse_date("") == datetime.now(timezone.utc).date()


def test_parse_rfc3339_keeps_local_date():
    assert parse_date("2021-03-04T23:30:00-05:00") == date(2021, 3, 4)


def test_parse_rfc3339_with_fraction_and_zulu():
    assert parse_date("2019-12-31T10:00:00.123Z") == date(2019, 12, 31)


@pytest.mark.parametrize("text", ["04/03/2021", "2021-13-01", "yesterday", "2021-02-30T10:00:00Z"])
def test_parse_invalid(text):
    with pytest.raises(ValueError, match="Invalid format for date"):
        parse_date(text)


def test_format_round_trip():
    day = date(2020, 7, 9)
    assert parse_date(format_date(day)) == day
    assert format_date(day) == "2020-07-09"


def test_end_of_month_leap_february():
    assert end_of_month(date(2020, 2, 10)) == date(2020, 2, 29)


def test_end_of_month_december():
    assert end_of_month(date(2021, 12, 1)) == date(2021, 12, 31)


def test_end_of_month_stays_in_month():
    for month in range(1, 13):
        last = end_of_month(date(2023, month, 1))
        assert last.month == month
        assert (last + timedelta(days=1)).day == 1


def test_is_future():
    assert is_future(date.today() + timedelta(days=2))
    assert not is_future(date(2000, 1, 1))


def test_today_is_utc_date():
    assert today() == datetime.now(timezone.utc).date()