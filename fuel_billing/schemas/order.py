from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class OrderItemCreate(BaseModel):
    vehicle_id: int
    fuel_id: int
    fuel_qty: Decimal = Field(gt=0)
    per_ltr_price: Decimal = Field(ge=0)
    total_price: Decimal | None = Field(default=None, ge=0)


class OrderCreate(BaseModel):
    organization_id: int
    sold_date: date
    order_items: list[OrderItemCreate] = Field(min_length=1)


class OrderUpdate(BaseModel):
    organization_id: int | None = None
    vehicle_id: int | None = None
    fuel_id: int | None = None
    fuel_qty: Decimal | None = Field(default=None, gt=0)
    per_ltr_price: Decimal | None = Field(default=None, ge=0)
    total_price: Decimal | None = Field(default=None, ge=0)
    sold_date: date | None = None


class OrderRead(BaseModel):
    id: int
    order_no: str
    organization_id: int
    vehicle_id: int
    fuel_id: int
    fuel_qty: Decimal
    per_ltr_price: Decimal
    total_price: Decimal
    sold_date: date
    created_at: datetime

    model_config = {"from_attributes": True}


class OrderStats(BaseModel):
    total_vehicles: int
    total_quantity: Decimal
    total_sales: Decimal


class OrderPage(BaseModel):
    items: list[OrderRead]
    total: int
    page: int
    per_page: int
    stats: OrderStats
