from datetime import date
from decimal import ROUND_HALF_UP, Decimal
import logging

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from ..models import Fuel, Order, Organization, Vehicle
from ..models.base import utcnow
from ..schemas import OrderCreate, OrderUpdate
from .catalog import get_organization, payload_changes
from .errors import InvalidInput
from .invoices import generate_monthly_invoice

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "id": Order.id,
    "organization_id": Order.organization_id,
    "vehicle_id": Order.vehicle_id,
    "fuel_id": Order.fuel_id,
    "fuel_qty": Order.fuel_qty,
    "total_price": Order.total_price,
    "sold_date": Order.sold_date,
    "created_at": Order.created_at,
}


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def next_order_no(db: Session) -> str:
    # Soft-deleted orders keep their numbers.
    last_no = db.execute(
        select(Order.order_no).order_by(Order.id.desc()).limit(1)
    ).scalar_one_or_none()
    if last_no is None:
        return f"{date.today():%d%m%y}0001"
    return str(int(last_no) + 1)


def _check_refs(
    db: Session, organization_id: int, vehicle_id: int, fuel_id: int, label: str
) -> list[str]:
    errors: list[str] = []
    vehicle = db.get(Vehicle, vehicle_id)
    if vehicle is None:
        errors.append(f"{label}: vehicle {vehicle_id} does not exist.")
    elif vehicle.organization_id != organization_id:
        errors.append(
            f"{label}: vehicle {vehicle.ucode} does not belong to organization "
            f"{organization_id}."
        )
    if db.get(Fuel, fuel_id) is None:
        errors.append(f"{label}: fuel {fuel_id} does not exist.")
    return errors


def create_orders(db: Session, payload: OrderCreate) -> list[Order]:
    """Record a batch of sales for one organization and day.

    The batch is all-or-nothing and refreshes that month's invoice.
    """
    if get_organization(db, payload.organization_id) is None:
        raise InvalidInput([f"Organization {payload.organization_id} does not exist."])

    errors: list[str] = []
    for index, item in enumerate(payload.order_items, start=1):
        errors.extend(
            _check_refs(
                db, payload.organization_id, item.vehicle_id, item.fuel_id, f"Item {index}"
            )
        )
    if errors:
        raise InvalidInput(errors)

    orders: list[Order] = []
    try:
        for item in payload.order_items:
            total_price = item.total_price
            if total_price is None:
                total_price = _money(item.fuel_qty * item.per_ltr_price)
            order = Order(
                order_no=next_order_no(db),
                organization_id=payload.organization_id,
                vehicle_id=item.vehicle_id,
                fuel_id=item.fuel_id,
                fuel_qty=item.fuel_qty,
                per_ltr_price=item.per_ltr_price,
                total_price=total_price,
                sold_date=payload.sold_date,
            )
            db.add(order)
            db.flush()
            orders.append(order)

        generate_monthly_invoice(db, payload.organization_id, payload.sold_date)
        db.commit()
    except Exception:
        db.rollback()
        raise

    for order in orders:
        db.refresh(order)
    return orders


def get_order(db: Session, order_id: int) -> Order | None:
    order = db.get(Order, order_id)
    if order is None or order.is_deleted:
        return None
    return order


def _same_period(a: tuple[int, date], b: tuple[int, date]) -> bool:
    return a[0] == b[0] and (a[1].year, a[1].month) == (b[1].year, b[1].month)


def update_order(db: Session, order: Order, payload: OrderUpdate) -> Order:
    previous = (order.organization_id, order.sold_date)
    changes = payload_changes(payload)

    organization_id = changes.get("organization_id", order.organization_id)
    if get_organization(db, organization_id) is None:
        raise InvalidInput([f"Organization {organization_id} does not exist."])
    errors = _check_refs(
        db,
        organization_id,
        changes.get("vehicle_id", order.vehicle_id),
        changes.get("fuel_id", order.fuel_id),
        f"Order {order.order_no}",
    )
    if errors:
        raise InvalidInput(errors)

    try:
        for key, value in changes.items():
            setattr(order, key, value)
        if "total_price" not in changes and (
            "fuel_qty" in changes or "per_ltr_price" in changes
        ):
            order.total_price = _money(order.fuel_qty * order.per_ltr_price)
        db.flush()

        current = (order.organization_id, order.sold_date)
        if not _same_period(previous, current):
            generate_monthly_invoice(db, *previous)
        generate_monthly_invoice(db, *current)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(order)
    return order


def delete_order(db: Session, order: Order) -> None:
    try:
        order.deleted_at = utcnow()
        db.flush()
        generate_monthly_invoice(db, order.organization_id, order.sold_date)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Deleted order %s", order.order_no)


def list_orders(
    db: Session,
    search: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    organization_id: int | None = None,
    vehicle_id: int | None = None,
    fuel_id: int | None = None,
    sort: str = "-id",
    page: int = 1,
    per_page: int = 25,
) -> tuple[list[Order], int, dict]:
    filters = [Order.deleted_at.is_(None)]
    if search:
        like = f"%{search}%"
        filters.append(
            or_(
                Order.order_no.ilike(like),
                Order.organization.has(
                    or_(Organization.name.ilike(like), Organization.name_bn.ilike(like))
                ),
                Order.vehicle.has(
                    or_(Vehicle.name.ilike(like), Vehicle.ucode.ilike(like))
                ),
            )
        )
    if start_date:
        filters.append(Order.sold_date >= start_date)
    if end_date:
        filters.append(Order.sold_date <= end_date)
    if organization_id is not None:
        filters.append(Order.organization_id == organization_id)
    if vehicle_id is not None:
        filters.append(Order.vehicle_id == vehicle_id)
    if fuel_id is not None:
        filters.append(Order.fuel_id == fuel_id)

    descending = sort.startswith("-")
    column = SORTABLE_FIELDS.get(sort.lstrip("-"))
    if column is None:
        raise InvalidInput([f"Cannot sort by {sort!r}."])
    ordering = column.desc() if descending else column.asc()

    total_vehicles, total_quantity, total_sales, total = db.execute(
        select(
            func.count(func.distinct(Order.vehicle_id)),
            func.sum(Order.fuel_qty),
            func.sum(Order.total_price),
            func.count(Order.id),
        ).where(*filters)
    ).one()

    page = max(page, 1)
    orders = list(
        db.scalars(
            select(Order)
            .where(*filters)
            .order_by(ordering, Order.id.desc())
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
    )
    stats = {
        "total_vehicles": total_vehicles or 0,
        "total_quantity": Decimal(str(total_quantity or 0)),
        "total_sales": Decimal(str(total_sales or 0)),
    }
    return orders, total, stats
