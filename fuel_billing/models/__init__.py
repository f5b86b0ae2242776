from .base import Base
from .fuel import Fuel
from .invoice import Invoice
from .order import Order
from .organization import Organization
from .vehicle import Vehicle

__all__ = [
    "Base",
    "Fuel",
    "Invoice",
    "Order",
    "Organization",
    "Vehicle",
]
