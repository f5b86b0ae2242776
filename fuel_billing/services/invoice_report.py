"""Reshape per-vehicle/per-day order aggregates into the monthly invoice report.

The report has one row per fuel. Each row lists the vehicles that bought that
fuel with one quantity slot per calendar day of the month, so column ``i``
always means day ``i + 1`` whether or not anything was sold that day.
"""

import math
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from .errors import NoDataForPeriod
from .periods import MONTH_NAMES, Period

MAX_VEHICLES_PER_PAGE = 12
FUEL_TYPES_PER_PAGE = 3

ZERO = Decimal("0")


@dataclass(frozen=True)
class DayHeader:
    day: int
    month: str
    year: str


@dataclass(frozen=True)
class FuelPriceRow:
    fuel_id: int
    fuel_name: str
    price: Decimal


@dataclass(frozen=True)
class VehicleDayAggregate:
    fuel_name: str
    ucode: str
    day: int
    total_qty: Decimal
    total_price: Decimal
    order_count: int


@dataclass
class VehicleReportEntry:
    ucode: str
    quantities: list[Decimal]
    total_qty: Decimal = ZERO
    total_price: Decimal = ZERO
    order_count: int = 0


@dataclass(frozen=True)
class PriceRange:
    start: int
    end: int
    price: Decimal

    @property
    def label(self) -> str:
        return f"{self.start}-{self.end}"


@dataclass
class ReportRow:
    fuel_name: str
    per_ltr_price: Decimal
    total_qty: Decimal
    total_price: Decimal
    vehicles: list[VehicleReportEntry] = field(default_factory=list)
    price_ranges: list[PriceRange] = field(default_factory=list)

    @property
    def total_coupon(self) -> int:
        return sum(vehicle.order_count for vehicle in self.vehicles)


@dataclass
class InvoiceReport:
    rows: list[ReportRow]
    day_headers: list[DayHeader]
    total_bill: Decimal
    total_coupon: int
    total_qty: Decimal
    page_count: int

    def __iter__(self) -> Iterator[object]:
        # Allows ``rows, headers, bill, coupon, qty, pages = report``.
        return iter(
            (
                self.rows,
                self.day_headers,
                self.total_bill,
                self.total_coupon,
                self.total_qty,
                self.page_count,
            )
        )


def build_day_headers(anchor: date, days_in_month: int) -> list[DayHeader]:
    month = MONTH_NAMES[anchor.month - 1][:3]
    year = f"{anchor.year:04d}"
    return [DayHeader(day=day, month=month, year=year) for day in range(1, days_in_month + 1)]


def build_fuel_row(
    fuel: FuelPriceRow,
    aggregates: list[VehicleDayAggregate],
    day_headers: list[DayHeader],
) -> tuple[ReportRow, int]:
    """Build one fuel's report row.

    Returns the row and the coupon count of every vehicle entry that was
    built for it, including entries dropped for having no billable total.
    """
    slot_by_day = {header.day: index for index, header in enumerate(day_headers)}
    fuel_total_qty = ZERO
    entries: dict[str, VehicleReportEntry] = {}

    for aggregate in aggregates:
        if aggregate.fuel_name != fuel.fuel_name:
            continue
        fuel_total_qty += aggregate.total_qty

        entry = entries.get(aggregate.ucode)
        if entry is None:
            entry = VehicleReportEntry(
                ucode=aggregate.ucode, quantities=[ZERO] * len(day_headers)
            )
            entries[aggregate.ucode] = entry

        slot = slot_by_day.get(aggregate.day)
        if slot is not None:
            entry.quantities[slot] += aggregate.total_qty
        entry.total_qty += aggregate.total_qty
        entry.total_price += aggregate.total_price
        entry.order_count += aggregate.order_count

    coupons = sum(entry.order_count for entry in entries.values())
    vehicles = [entry for entry in entries.values() if entry.total_price > 0]

    row = ReportRow(
        fuel_name=fuel.fuel_name,
        per_ltr_price=fuel.price,
        total_qty=fuel_total_qty,
        total_price=fuel_total_qty * fuel.price,
        vehicles=vehicles,
    )
    return row, coupons


def build_price_ranges(
    day_prices: dict[int, Decimal], days_in_month: int
) -> list[PriceRange]:
    """Group consecutive days charged the same per-liter price.

    A day without a sale keeps the previous day's price. The first range
    always starts on day 1.
    """
    ranges: list[PriceRange] = []
    current: Decimal | None = None
    start = 1
    for day in range(1, days_in_month + 1):
        price = day_prices.get(day, current)
        if price == current:
            continue
        if current is not None:
            ranges.append(PriceRange(start=start, end=day - 1, price=current))
            start = day
        current = price
    if current is not None:
        ranges.append(PriceRange(start=start, end=days_in_month, price=current))
    return ranges


def calculate_page_count(rows: list[ReportRow]) -> int:
    total_vehicles = sum(len(row.vehicles) for row in rows)
    total_fuel_types = len(rows)

    pages = max(1, math.ceil(total_vehicles / MAX_VEHICLES_PER_PAGE))
    if total_fuel_types > 1:
        pages += math.ceil(total_fuel_types / FUEL_TYPES_PER_PAGE) - 1
    return max(1, pages)


def aggregate_report(
    organization_id: int,
    period: Period,
    fuels: list[FuelPriceRow],
    aggregates: list[VehicleDayAggregate],
    daily_prices: dict[str, dict[int, Decimal]] | None = None,
) -> InvoiceReport:
    day_headers = build_day_headers(period.anchor, period.days_in_month)
    daily_prices = daily_prices or {}

    rows: list[ReportRow] = []
    total_bill = ZERO
    total_qty = ZERO
    total_coupon = 0
    for fuel in fuels:
        row, coupons = build_fuel_row(fuel, aggregates, day_headers)
        row.price_ranges = build_price_ranges(
            daily_prices.get(fuel.fuel_name, {}), period.days_in_month
        )
        rows.append(row)
        total_bill += row.total_price
        total_qty += row.total_qty
        total_coupon += coupons

    if not rows:
        raise NoDataForPeriod(organization_id, period.label)

    return InvoiceReport(
        rows=rows,
        day_headers=day_headers,
        total_bill=total_bill,
        total_coupon=total_coupon,
        total_qty=total_qty,
        page_count=calculate_page_count(rows),
    )
