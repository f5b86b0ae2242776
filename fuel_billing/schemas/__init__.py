from .catalog import (
    FuelCreate,
    FuelRead,
    FuelUpdate,
    OrganizationCreate,
    OrganizationRead,
    OrganizationUpdate,
    VehicleCreate,
    VehicleRead,
    VehicleUpdate,
)
from .dashboard import DashboardOverview, VehicleDashboard
from .order import (
    OrderCreate,
    OrderItemCreate,
    OrderPage,
    OrderRead,
    OrderStats,
    OrderUpdate,
)
