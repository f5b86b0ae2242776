from datetime import date
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..schemas import OrderCreate, OrderPage, OrderRead, OrderUpdate
from ..services import orders as orders_service
from ..services.errors import InvalidInput

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_or_404(db: Session, order_id: int):
    order = orders_service.get_order(db, order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.post("/", response_model=list[OrderRead], status_code=201)
def create_orders(payload: OrderCreate, db: Session = Depends(get_db)) -> list[OrderRead]:
    try:
        orders = orders_service.create_orders(db, payload)
    except InvalidInput as exc:
        raise HTTPException(status_code=422, detail=exc.errors)
    logger.info(
        "Created %s order(s) for organization %s on %s",
        len(orders),
        payload.organization_id,
        payload.sold_date,
    )
    return orders


@router.get("/", response_model=OrderPage)
def list_orders(
    search: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    organization_id: int | None = None,
    vehicle_id: int | None = None,
    fuel_id: int | None = None,
    sort: str = "-id",
    page: int = Query(1, ge=1),
    per_page: int | None = Query(None, ge=1, le=200),
    db: Session = Depends(get_db),
) -> OrderPage:
    per_page = per_page or settings.orders_per_page
    try:
        orders, total, stats = orders_service.list_orders(
            db,
            search=search,
            start_date=start_date,
            end_date=end_date,
            organization_id=organization_id,
            vehicle_id=vehicle_id,
            fuel_id=fuel_id,
            sort=sort,
            page=page,
            per_page=per_page,
        )
    except InvalidInput as exc:
        raise HTTPException(status_code=422, detail=exc.errors)
    return OrderPage(
        items=[OrderRead.model_validate(order) for order in orders],
        total=total,
        page=page,
        per_page=per_page,
        stats=stats,
    )


@router.get("/{order_id}", response_model=OrderRead)
def get_order(order_id: int, db: Session = Depends(get_db)) -> OrderRead:
    return _get_or_404(db, order_id)


@router.patch("/{order_id}", response_model=OrderRead)
def update_order(
    order_id: int, payload: OrderUpdate, db: Session = Depends(get_db)
) -> OrderRead:
    order = _get_or_404(db, order_id)
    try:
        return orders_service.update_order(db, order, payload)
    except InvalidInput as exc:
        raise HTTPException(status_code=422, detail=exc.errors)


@router.delete("/{order_id}", status_code=204)
def delete_order(order_id: int, db: Session = Depends(get_db)) -> None:
    orders_service.delete_order(db, _get_or_404(db, order_id))
