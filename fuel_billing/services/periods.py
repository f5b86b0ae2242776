"""Calendar-month invoicing windows."""

import calendar
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date, datetime, time

from .errors import InvalidPeriod

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


@dataclass(frozen=True)
class Period:
    """One invoicing month.

    ``start`` is midnight of the first day and ``end`` the last instant of the
    last day, so both bounds are inclusive. ``anchor`` is the first day of the
    month and drives every display label.
    """

    start: datetime
    end: datetime
    anchor: date

    @property
    def month(self) -> int:
        return self.anchor.month

    @property
    def year(self) -> int:
        return self.anchor.year

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.anchor.month - 1]

    @property
    def month_abbr(self) -> str:
        return self.month_name[:3]

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.anchor.year, self.anchor.month)[1]

    @property
    def label(self) -> str:
        return f"{self.month_name} {self.year}"

    def contains(self, value: date) -> bool:
        return self.start.date() <= value <= self.end.date()


def resolve_period(month, year) -> Period:
    if isinstance(month, bool) or isinstance(year, bool):
        raise InvalidPeriod(month, year)
    try:
        month = int(month)
        year = int(year)
    except (TypeError, ValueError):
        raise InvalidPeriod(month, year) from None
    if not 1 <= month <= 12 or not MINYEAR <= year <= MAXYEAR:
        raise InvalidPeriod(month, year)

    days = calendar.monthrange(year, month)[1]
    anchor = date(year, month, 1)
    return Period(
        start=datetime.combine(anchor, time.min),
        end=datetime.combine(date(year, month, days), time.max),
        anchor=anchor,
    )


def period_for(day: date) -> Period:
    return resolve_period(day.month, day.year)


def month_number(name: str) -> int:
    """Map a stored month name ("October", "october") back to 1-12."""
    lowered = name.strip().lower()
    for index, month_name in enumerate(MONTH_NAMES, start=1):
        if month_name.lower() == lowered:
            return index
    raise InvalidPeriod(name, None)
