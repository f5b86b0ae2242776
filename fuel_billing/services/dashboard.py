from datetime import date
from decimal import Decimal

from sqlalchemy import extract, func, select
from sqlalchemy.orm import Session

from ..models import Fuel, Order, Organization, Vehicle

UNSPECIFIED = "unspecified"


def _decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def _live_orders() -> list:
    return [Order.deleted_at.is_(None)]


def month_cutoff(today: date, months: int) -> date:
    """First day of the month ``months - 1`` months before ``today``."""
    index = today.year * 12 + today.month - 1 - (months - 1)
    return date(index // 12, index % 12 + 1, 1)


def fetch_counts(db: Session) -> dict:
    return {
        "total_vehicles": db.execute(select(func.count(Vehicle.id))).scalar_one(),
        "total_organizations": db.execute(
            select(func.count(Organization.id)).where(Organization.deleted_at.is_(None))
        ).scalar_one(),
        "total_orders": db.execute(
            select(func.count(Order.id)).where(*_live_orders())
        ).scalar_one(),
        "total_fuel_types": db.execute(select(func.count(Fuel.id))).scalar_one(),
    }


def recent_orders(db: Session, limit: int = 5) -> list[dict]:
    rows = db.execute(
        select(
            Order.id,
            Order.order_no,
            Organization.ucode,
            Vehicle.ucode,
            Fuel.name,
            Order.fuel_qty,
            Order.total_price,
            Order.sold_date,
        )
        .join(Organization, Order.organization_id == Organization.id)
        .join(Vehicle, Order.vehicle_id == Vehicle.id)
        .join(Fuel, Order.fuel_id == Fuel.id)
        .where(*_live_orders())
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(limit)
    ).all()
    return [
        {
            "id": order_id,
            "order_no": order_no,
            "organization": organization,
            "vehicle": vehicle,
            "fuel": fuel,
            "fuel_qty": _decimal(fuel_qty),
            "total_price": _decimal(total_price),
            "sold_date": sold_date,
        }
        for (
            order_id,
            order_no,
            organization,
            vehicle,
            fuel,
            fuel_qty,
            total_price,
            sold_date,
        ) in rows
    ]


def orders_by_month(db: Session, months: int = 6, today: date | None = None) -> list[dict]:
    """Order count and revenue per sold month, oldest first."""
    cutoff = month_cutoff(today or date.today(), months)
    sold_year = extract("year", Order.sold_date)
    sold_month = extract("month", Order.sold_date)
    rows = db.execute(
        select(
            sold_year.label("year"),
            sold_month.label("month"),
            func.count(Order.id).label("order_count"),
            func.sum(Order.total_price).label("total_revenue"),
        )
        .where(*_live_orders(), Order.sold_date >= cutoff)
        .group_by(sold_year, sold_month)
        .order_by(sold_year, sold_month)
    ).all()
    return [
        {
            "month": f"{int(year):04d}-{int(month):02d}",
            "count": int(order_count),
            "total_revenue": _decimal(total_revenue),
        }
        for year, month, order_count, total_revenue in rows
    ]


def fuel_consumption(db: Session) -> list[dict]:
    rows = db.execute(
        select(
            Fuel.name,
            func.sum(Order.fuel_qty).label("total_qty"),
            func.sum(Order.total_price).label("total_price"),
        )
        .select_from(Order)
        .join(Fuel, Order.fuel_id == Fuel.id)
        .where(*_live_orders())
        .group_by(Fuel.name)
        .order_by(Fuel.name)
    ).all()
    return [
        {
            "fuel_name": fuel_name,
            "total_qty": _decimal(total_qty),
            "total_price": _decimal(total_price),
        }
        for fuel_name, total_qty, total_price in rows
    ]


def vehicles_by_organization(db: Session, limit: int | None = None) -> list[dict]:
    vehicle_count = func.count(Vehicle.id)
    query = (
        select(Organization.id, Organization.ucode, Organization.name, vehicle_count)
        .outerjoin(Vehicle, Vehicle.organization_id == Organization.id)
        .where(Organization.deleted_at.is_(None))
        .group_by(Organization.id, Organization.ucode, Organization.name)
        .order_by(vehicle_count.desc(), Organization.ucode)
    )
    if limit is not None:
        query = query.limit(limit)
    return [
        {"id": org_id, "ucode": ucode, "name": name, "vehicle_count": int(count)}
        for org_id, ucode, name, count in db.execute(query).all()
    ]


def vehicles_by_type(db: Session) -> list[dict]:
    vehicle_count = func.count(Vehicle.id)
    rows = db.execute(
        select(Vehicle.type, vehicle_count)
        .group_by(Vehicle.type)
        .order_by(vehicle_count.desc(), Vehicle.type)
    ).all()
    return [
        {"type": vehicle_type or UNSPECIFIED, "count": int(count)}
        for vehicle_type, count in rows
    ]


def vehicles_by_fuel(db: Session) -> list[dict]:
    # Vehicles without a default fuel are left out.
    vehicle_count = func.count(Vehicle.id)
    rows = db.execute(
        select(Fuel.name, vehicle_count)
        .select_from(Vehicle)
        .join(Fuel, Vehicle.fuel_id == Fuel.id)
        .group_by(Fuel.name)
        .order_by(vehicle_count.desc(), Fuel.name)
    ).all()
    return [{"fuel_name": fuel_name, "count": int(count)} for fuel_name, count in rows]


def recent_vehicles(db: Session, limit: int = 10) -> list[dict]:
    rows = db.execute(
        select(Vehicle.id, Vehicle.ucode, Vehicle.name, Vehicle.type, Organization.ucode)
        .join(Organization, Vehicle.organization_id == Organization.id)
        .order_by(Vehicle.created_at.desc(), Vehicle.id.desc())
        .limit(limit)
    ).all()
    return [
        {
            "id": vehicle_id,
            "ucode": ucode,
            "name": name,
            "type": vehicle_type,
            "organization": organization,
        }
        for vehicle_id, ucode, name, vehicle_type, organization in rows
    ]


def vehicle_order_stats(db: Session, limit: int = 10) -> list[dict]:
    order_count = func.count(Order.id)
    rows = db.execute(
        select(
            Vehicle.id,
            Vehicle.ucode,
            order_count.label("order_count"),
            func.sum(Order.fuel_qty).label("total_fuel_qty"),
            func.sum(Order.total_price).label("total_spent"),
        )
        .select_from(Order)
        .join(Vehicle, Order.vehicle_id == Vehicle.id)
        .where(*_live_orders())
        .group_by(Vehicle.id, Vehicle.ucode)
        .order_by(order_count.desc(), Vehicle.ucode)
        .limit(limit)
    ).all()
    return [
        {
            "vehicle_id": vehicle_id,
            "ucode": ucode,
            "order_count": int(count),
            "total_fuel_qty": _decimal(total_fuel_qty),
            "total_spent": _decimal(total_spent),
        }
        for vehicle_id, ucode, count, total_fuel_qty, total_spent in rows
    ]


def overview(db: Session, today: date | None = None) -> dict:
    return {
        "statistics": fetch_counts(db),
        "recent_orders": recent_orders(db),
        "vehicles_by_type": vehicles_by_type(db),
        "orders_by_month": orders_by_month(db, today=today),
        "top_organizations": vehicles_by_organization(db, limit=5),
        "fuel_consumption": fuel_consumption(db),
    }


def vehicle_overview(db: Session) -> dict:
    return {
        "total_vehicles": fetch_counts(db)["total_vehicles"],
        "vehicles_by_type": vehicles_by_type(db),
        "vehicles_by_fuel": vehicles_by_fuel(db),
        "vehicles_by_organization": vehicles_by_organization(db),
        "recent_vehicles": recent_vehicles(db),
        "vehicle_orders": vehicle_order_stats(db),
    }
