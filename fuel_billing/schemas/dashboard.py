from datetime import date
from decimal import Decimal

from pydantic import BaseModel


class DashboardCounts(BaseModel):
    total_vehicles: int
    total_organizations: int
    total_orders: int
    total_fuel_types: int


class RecentOrder(BaseModel):
    id: int
    order_no: str
    organization: str
    vehicle: str
    fuel: str
    fuel_qty: Decimal
    total_price: Decimal
    sold_date: date


class TypeCount(BaseModel):
    type: str
    count: int


class FuelCount(BaseModel):
    fuel_name: str
    count: int


class MonthlyOrders(BaseModel):
    month: str
    count: int
    total_revenue: Decimal


class OrganizationVehicles(BaseModel):
    id: int
    ucode: str
    name: str
    vehicle_count: int


class FuelConsumption(BaseModel):
    fuel_name: str
    total_qty: Decimal
    total_price: Decimal


class RecentVehicle(BaseModel):
    id: int
    ucode: str
    name: str | None
    type: str | None
    organization: str


class VehicleOrders(BaseModel):
    vehicle_id: int
    ucode: str
    order_count: int
    total_fuel_qty: Decimal
    total_spent: Decimal


class DashboardOverview(BaseModel):
    statistics: DashboardCounts
    recent_orders: list[RecentOrder]
    vehicles_by_type: list[TypeCount]
    orders_by_month: list[MonthlyOrders]
    top_organizations: list[OrganizationVehicles]
    fuel_consumption: list[FuelConsumption]


class VehicleDashboard(BaseModel):
    total_vehicles: int
    vehicles_by_type: list[TypeCount]
    vehicles_by_fuel: list[FuelCount]
    vehicles_by_organization: list[OrganizationVehicles]
    recent_vehicles: list[RecentVehicle]
    vehicle_orders: list[VehicleOrders]
