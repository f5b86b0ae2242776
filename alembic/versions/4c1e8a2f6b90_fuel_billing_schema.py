"""fuel billing schema

Revision ID: 4c1e8a2f6b90
Revises:
Create Date: 2026-10-19 10:00:00.000000
"""
from alembic import op
import sqlalchemy as sa


revision = "4c1e8a2f6b90"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "organizations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("ucode", sa.String(length=50), nullable=False, unique=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("name_bn", sa.String(length=255), nullable=True),
        sa.Column("logo", sa.String(length=255), nullable=True),
        sa.Column("is_vat_applied", sa.Boolean(), nullable=False),
        sa.Column("vat_rate", sa.Numeric(8, 2), nullable=False),
        sa.Column("vat_flat_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
    )
    op.create_table(
        "fuels",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False, unique=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_table(
        "vehicles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "organization_id",
            sa.Integer(),
            sa.ForeignKey("organizations.id"),
            nullable=False,
        ),
        sa.Column("fuel_id", sa.Integer(), sa.ForeignKey("fuels.id"), nullable=True),
        sa.Column("ucode", sa.String(length=50), nullable=False, unique=True),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("model", sa.String(length=100), nullable=True),
        sa.Column("type", sa.String(length=100), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_vehicles_organization_id", "vehicles", ["organization_id"])
    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_no", sa.String(length=50), nullable=False, unique=True),
        sa.Column(
            "organization_id",
            sa.Integer(),
            sa.ForeignKey("organizations.id"),
            nullable=False,
        ),
        sa.Column("vehicle_id", sa.Integer(), sa.ForeignKey("vehicles.id"), nullable=False),
        sa.Column("fuel_id", sa.Integer(), sa.ForeignKey("fuels.id"), nullable=False),
        sa.Column("fuel_qty", sa.Numeric(12, 2), nullable=False),
        sa.Column("per_ltr_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(15, 2), nullable=False),
        sa.Column("sold_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_orders_sold_date", "orders", ["sold_date"])
    op.create_index("ix_orders_organization_id", "orders", ["organization_id"])
    op.create_index("ix_orders_vehicle_id", "orders", ["vehicle_id"])
    op.create_index("ix_orders_fuel_id", "orders", ["fuel_id"])
    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "organization_id",
            sa.Integer(),
            sa.ForeignKey("organizations.id"),
            nullable=False,
        ),
        sa.Column("month", sa.String(length=20), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("total_bill", sa.Numeric(20, 2), nullable=False),
        sa.Column("total_qty", sa.Numeric(14, 2), nullable=False),
        sa.Column("total_coupon", sa.Integer(), nullable=False),
        sa.Column("page_count", sa.Integer(), nullable=False),
        sa.Column("order_ids", sa.JSON(), nullable=False),
        sa.Column("fuel_breakdown", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint(
            "organization_id", "month", "year", name="uq_invoices_org_period"
        ),
    )


def downgrade() -> None:
    op.drop_table("invoices")
    op.drop_index("ix_orders_fuel_id", table_name="orders")
    op.drop_index("ix_orders_vehicle_id", table_name="orders")
    op.drop_index("ix_orders_organization_id", table_name="orders")
    op.drop_index("ix_orders_sold_date", table_name="orders")
    op.drop_table("orders")
    op.drop_index("ix_vehicles_organization_id", table_name="vehicles")
    op.drop_table("vehicles")
    op.drop_table("fuels")
    op.drop_table("organizations")
