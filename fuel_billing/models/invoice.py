from decimal import Decimal

from sqlalchemy import JSON, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class Invoice(TimestampMixin, Base):
    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint(
            "organization_id", "month", "year", name="uq_invoices_org_period"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    organization_id: Mapped[int] = mapped_column(
        ForeignKey("organizations.id"), nullable=False
    )
    month: Mapped[str] = mapped_column(String(20), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    total_bill: Mapped[Decimal] = mapped_column(Numeric(20, 2), nullable=False)
    total_qty: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    total_coupon: Mapped[int] = mapped_column(Integer, nullable=False)
    page_count: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    order_ids: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    fuel_breakdown: Mapped[list[dict] | None] = mapped_column(JSON)
    organization: Mapped["Organization"] = relationship("Organization")
