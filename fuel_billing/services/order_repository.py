from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import extract, func, select
from sqlalchemy.orm import Session

from ..models import Fuel, Order, Vehicle
from .invoice_report import FuelPriceRow, VehicleDayAggregate


def _decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def _period_filters(organization_id: int, start, end) -> list:
    return [
        Order.organization_id == organization_id,
        Order.deleted_at.is_(None),
        Order.sold_date >= _as_date(start),
        Order.sold_date <= _as_date(end),
    ]


def fetch_fuel_price_rows(
    db: Session, organization_id: int, start, end
) -> list[FuelPriceRow]:
    """Fuels sold to the organization in the range, with the price last charged.

    Fuels come back in the order of their first order in the range. The price
    is the ``per_ltr_price`` of the latest order by sold date (then id).
    """
    rows = db.execute(
        select(Fuel.id, Fuel.name, Order.id, Order.sold_date, Order.per_ltr_price)
        .join(Fuel, Order.fuel_id == Fuel.id)
        .where(*_period_filters(organization_id, start, end))
        .order_by(Order.id.asc())
    ).all()

    first_seen: dict[int, str] = {}
    latest: dict[int, tuple[date, int, Decimal]] = {}
    for fuel_id, fuel_name, order_id, sold_date, per_ltr_price in rows:
        first_seen.setdefault(fuel_id, fuel_name)
        current = latest.get(fuel_id)
        if current is None or (sold_date, order_id) >= current[:2]:
            latest[fuel_id] = (sold_date, order_id, _decimal(per_ltr_price))

    return [
        FuelPriceRow(fuel_id=fuel_id, fuel_name=fuel_name, price=latest[fuel_id][2])
        for fuel_id, fuel_name in first_seen.items()
    ]


def fetch_vehicle_day_aggregates(
    db: Session, organization_id: int, start, end
) -> list[VehicleDayAggregate]:
    sold_day = extract("day", Order.sold_date)
    rows = db.execute(
        select(
            Fuel.name,
            Vehicle.ucode,
            sold_day.label("sold_day"),
            func.sum(Order.fuel_qty).label("total_qty"),
            func.sum(Order.total_price).label("total_price"),
            func.count(Order.id).label("order_count"),
        )
        .join(Fuel, Order.fuel_id == Fuel.id)
        .join(Vehicle, Order.vehicle_id == Vehicle.id)
        .where(*_period_filters(organization_id, start, end))
        .group_by(Fuel.name, Vehicle.ucode, sold_day)
        .order_by(Fuel.name, Vehicle.ucode, sold_day.asc())
    ).all()

    return [
        VehicleDayAggregate(
            fuel_name=fuel_name,
            ucode=ucode,
            day=int(day),
            total_qty=_decimal(total_qty),
            total_price=_decimal(total_price),
            order_count=int(order_count),
        )
        for fuel_name, ucode, day, total_qty, total_price, order_count in rows
    ]


def fetch_daily_prices(
    db: Session, organization_id: int, start, end
) -> dict[str, dict[int, Decimal]]:
    """Per fuel name, the per-liter price charged on each day with a sale.

    When a day has several orders the latest one (by id) wins. Zero prices
    are ignored.
    """
    rows = db.execute(
        select(Fuel.name, Order.sold_date, Order.per_ltr_price)
        .join(Fuel, Order.fuel_id == Fuel.id)
        .where(*_period_filters(organization_id, start, end), Order.per_ltr_price > 0)
        .order_by(Order.sold_date, Order.id)
    ).all()

    prices: dict[str, dict[int, Decimal]] = {}
    for fuel_name, sold_date, per_ltr_price in rows:
        prices.setdefault(fuel_name, {})[sold_date.day] = _decimal(per_ltr_price)
    return prices


def fetch_order_ids(db: Session, organization_id: int, start, end) -> list[int]:
    return list(
        db.execute(
            select(Order.id)
            .where(*_period_filters(organization_id, start, end))
            .order_by(Order.id)
        ).scalars()
    )


def count_repeated_coupons(db: Session, organization_id: int, start, end) -> int:
    """Number of (day, vehicle) pairs that refuelled more than once."""
    repeated = (
        select(Order.sold_date, Order.vehicle_id)
        .where(*_period_filters(organization_id, start, end))
        .group_by(Order.sold_date, Order.vehicle_id)
        .having(func.count(Order.id) > 1)
        .subquery()
    )
    return db.execute(select(func.count()).select_from(repeated)).scalar_one()


def fetch_order_periods(db: Session) -> tuple[list[int], list[int]]:
    """Distinct months and years that have live orders."""
    months = db.execute(
        select(extract("month", Order.sold_date).label("month"))
        .where(Order.deleted_at.is_(None))
        .distinct()
        .order_by("month")
    ).scalars()
    years = db.execute(
        select(extract("year", Order.sold_date).label("year"))
        .where(Order.deleted_at.is_(None))
        .distinct()
        .order_by("year")
    ).scalars()
    return [int(month) for month in months], [int(year) for year in years]
