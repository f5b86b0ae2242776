from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
import logging

from sqlalchemy import case, func, or_, select
from sqlalchemy.orm import Session

from ..models import Invoice, Organization
from . import order_repository
from .invoice_report import InvoiceReport, ReportRow, aggregate_report
from .periods import MONTH_NAMES, Period, month_number, period_for, resolve_period

logger = logging.getLogger(__name__)


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def build_report(
    db: Session, organization_id: int, start: datetime, end: datetime, anchor: date
) -> InvoiceReport:
    period = Period(start=start, end=end, anchor=anchor)
    fuels = order_repository.fetch_fuel_price_rows(db, organization_id, start, end)
    aggregates = order_repository.fetch_vehicle_day_aggregates(
        db, organization_id, start, end
    )
    daily_prices = order_repository.fetch_daily_prices(db, organization_id, start, end)
    return aggregate_report(organization_id, period, fuels, aggregates, daily_prices)


def build_period_report(db: Session, organization_id: int, period: Period) -> InvoiceReport:
    return build_report(db, organization_id, period.start, period.end, period.anchor)


def fuel_breakdown(rows: list[ReportRow]) -> list[dict]:
    return [
        {
            "fuel_name": row.fuel_name,
            "total_qty": str(_money(row.total_qty)),
            "total_price": str(_money(row.total_price)),
            "total_coupon": row.total_coupon,
        }
        for row in rows
    ]


def find_invoice(db: Session, organization_id: int, period: Period) -> Invoice | None:
    return db.execute(
        select(Invoice)
        .where(
            Invoice.organization_id == organization_id,
            Invoice.month == period.month_name,
            Invoice.year == period.year,
        )
        .with_for_update()
    ).scalar_one_or_none()


def upsert_invoice(
    db: Session,
    organization_id: int,
    period: Period,
    total_bill: Decimal,
    total_coupon: int,
    total_qty: Decimal,
    page_count: int,
    order_ids: list[int],
    breakdown: list[dict] | None = None,
) -> Invoice:
    values = {
        "total_bill": _money(total_bill),
        "total_qty": _money(total_qty),
        "total_coupon": total_coupon,
        "page_count": page_count,
        "order_ids": list(order_ids),
        "fuel_breakdown": breakdown,
    }

    # uq_invoices_org_period rejects a second insert racing this one.
    invoice = find_invoice(db, organization_id, period)
    if invoice is None:
        invoice = Invoice(
            organization_id=organization_id,
            month=period.month_name,
            year=period.year,
        )
        db.add(invoice)

    for key, value in values.items():
        setattr(invoice, key, value)
    db.flush()
    return invoice


def delete_invoice(db: Session, organization_id: int, period: Period) -> bool:
    invoice = find_invoice(db, organization_id, period)
    if invoice is None:
        return False
    db.delete(invoice)
    db.flush()
    return True


def generate_monthly_invoice(
    db: Session, organization_id: int, sold_date: date
) -> Invoice | None:
    """Rebuild the summary for the month containing ``sold_date``.

    The caller owns the transaction. A period left without orders loses its
    summary and ``None`` is returned.
    """
    period = period_for(sold_date)
    order_ids = order_repository.fetch_order_ids(
        db, organization_id, period.start, period.end
    )
    if not order_ids:
        if delete_invoice(db, organization_id, period):
            logger.info(
                "Removed invoice for organization %s, %s: no orders left",
                organization_id,
                period.label,
            )
        return None

    report = build_period_report(db, organization_id, period)
    invoice = upsert_invoice(
        db,
        organization_id,
        period,
        total_bill=report.total_bill,
        total_coupon=report.total_coupon,
        total_qty=report.total_qty,
        page_count=report.page_count,
        order_ids=order_ids,
        breakdown=fuel_breakdown(report.rows),
    )
    logger.info(
        "Generated invoice for organization %s, %s: bill=%s coupons=%s pages=%s",
        organization_id,
        period.label,
        invoice.total_bill,
        invoice.total_coupon,
        invoice.page_count,
    )
    return invoice


def generate_invoice_for_period(
    db: Session, organization_id: int, month, year
) -> Invoice | None:
    period = resolve_period(month, year)
    return generate_monthly_invoice(db, organization_id, period.anchor)


def regenerate_all_invoices(db: Session) -> int:
    invoices = db.execute(select(Invoice).order_by(Invoice.id)).scalars().all()
    targets = [
        (invoice.organization_id, date(invoice.year, month_number(invoice.month), 1))
        for invoice in invoices
    ]
    for organization_id, first_day in targets:
        generate_monthly_invoice(db, organization_id, first_day)
    return len(targets)


def list_invoices(
    db: Session,
    q: str | None = None,
    page: int = 1,
    per_page: int = 15,
) -> tuple[list[tuple[Invoice, Organization]], int]:
    filters = []
    if q:
        like = f"%{q}%"
        filters.append(
            or_(
                Invoice.month.ilike(like),
                Organization.ucode.ilike(like),
                Organization.name.ilike(like),
                Organization.name_bn.ilike(like),
            )
        )
    query = (
        select(Invoice, Organization)
        .join(Organization, Invoice.organization_id == Organization.id)
        .where(*filters)
    )
    total = db.execute(
        select(func.count(Invoice.id))
        .select_from(Invoice)
        .join(Organization, Invoice.organization_id == Organization.id)
        .where(*filters)
    ).scalar_one()

    month_order = case(
        {name: index for index, name in enumerate(MONTH_NAMES, start=1)},
        value=Invoice.month,
        else_=0,
    )
    page = max(page, 1)
    rows = db.execute(
        query.order_by(Invoice.year.desc(), month_order.desc(), Organization.ucode)
        .offset((page - 1) * per_page)
        .limit(per_page)
    ).all()
    return rows, total


def invoices_for_month(db: Session, month, year) -> list[tuple[Invoice, Organization]]:
    period = resolve_period(month, year)
    return db.execute(
        select(Invoice, Organization)
        .join(Organization, Invoice.organization_id == Organization.id)
        .where(Invoice.month == period.month_name, Invoice.year == period.year)
        .order_by(Organization.ucode)
    ).all()
