from datetime import date, datetime, time

import pytest

from fuel_billing.services.errors import InvalidPeriod
from fuel_billing.services.invoice_report import build_day_headers
from fuel_billing.services.periods import month_number, period_for, resolve_period


def test_resolve_period_bounds():
    period = resolve_period(2, 2024)

    assert period.start == datetime(2024, 2, 1, 0, 0, 0)
    assert period.end == datetime.combine(date(2024, 2, 29), time.max)
    assert period.anchor == date(2024, 2, 1)
    assert period.month_name == "February"
    assert period.label == "February 2024"
    assert period.days_in_month == 29


@pytest.mark.parametrize(
    "month, year, days",
    [(1, 2025, 31), (2, 2025, 28), (2, 2000, 29), (4, 2025, 30), (12, 1999, 31)],
)
def test_day_headers_cover_every_day(month, year, days):
    period = resolve_period(month, year)
    headers = build_day_headers(period.anchor, period.days_in_month)

    assert len(headers) == days
    assert [header.day for header in headers] == list(range(1, days + 1))
    assert {header.year for header in headers} == {f"{year:04d}"}
    assert {header.month for header in headers} == {period.month_abbr}


@pytest.mark.parametrize(
    "month, year",
    [(0, 2025), (13, 2025), (-1, 2025), (5, 0), (5, 10000), ("may", 2025), (None, 2025), (True, 2025)],
)
def test_invalid_period_rejected(month, year):
    with pytest.raises(InvalidPeriod):
        resolve_period(month, year)


def test_numeric_strings_accepted():
    assert resolve_period("10", "2026").anchor == date(2026, 10, 1)


def test_period_for_and_contains():
    period = period_for(date(2026, 10, 19))

    assert period.month == 10
    assert period.contains(date(2026, 10, 1))
    assert period.contains(date(2026, 10, 31))
    assert not period.contains(date(2026, 11, 1))


def test_month_number_round_trips_names():
    assert month_number("October") == 10
    assert month_number("january") == 1
    with pytest.raises(InvalidPeriod):
        month_number("Smarch")
