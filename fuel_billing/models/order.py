from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, SoftDeleteMixin, TimestampMixin


class Order(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "orders"
    __table_args__ = (
        Index("ix_orders_sold_date", "sold_date"),
        Index("ix_orders_organization_id", "organization_id"),
        Index("ix_orders_vehicle_id", "vehicle_id"),
        Index("ix_orders_fuel_id", "fuel_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_no: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    organization_id: Mapped[int] = mapped_column(
        ForeignKey("organizations.id"), nullable=False
    )
    vehicle_id: Mapped[int] = mapped_column(ForeignKey("vehicles.id"), nullable=False)
    fuel_id: Mapped[int] = mapped_column(ForeignKey("fuels.id"), nullable=False)
    fuel_qty: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    per_ltr_price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    total_price: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), default=Decimal("0"), nullable=False
    )
    sold_date: Mapped[date] = mapped_column(Date, nullable=False)
    organization: Mapped["Organization"] = relationship("Organization")
    vehicle: Mapped["Vehicle"] = relationship("Vehicle")
    fuel: Mapped["Fuel"] = relationship("Fuel")
