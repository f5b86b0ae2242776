"""Invoice documents: the monthly invoice, its cover letter and the bill summary."""

import base64
from dataclasses import dataclass
from decimal import Decimal
from io import BytesIO
import logging
import mimetypes
from pathlib import Path
import zipfile

from jinja2 import Environment, FileSystemLoader, select_autoescape
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter
from openpyxl.workbook import Workbook

from ..config import TEMPLATE_DIR, settings
from ..models import Invoice, Organization
from .invoice_report import InvoiceReport
from .periods import Period

logger = logging.getLogger(__name__)

HTML_MEDIA_TYPE = "text/html; charset=utf-8"
ZIP_MEDIA_TYPE = "application/zip"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass(frozen=True)
class Document:
    filename: str
    content: bytes
    media_type: str


def blank_zero(value) -> str:
    """Render a quantity without trailing zeros, and zero as an empty cell."""
    if value is None or value == "":
        return ""
    number = Decimal(str(value))
    if number == 0:
        return ""
    if number == number.to_integral_value():
        return str(number.quantize(Decimal("1")))
    return format(number.normalize(), "f")


def money(value) -> str:
    return f"{Decimal(str(value or 0)):,.2f}"


environment = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
)
environment.filters["blank_zero"] = blank_zero
environment.filters["money"] = money


def _logo_data_uri() -> str | None:
    if not settings.invoice_logo_path:
        return None
    path = Path(settings.invoice_logo_path)
    if not path.is_file():
        logger.warning("Invoice logo %s not found", path)
        return None
    media_type = mimetypes.guess_type(path.name)[0] or "image/png"
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{media_type};base64,{encoded}"


def file_stem(organization: Organization, period: Period) -> str:
    return f"{organization.ucode}_{organization.name}_{period.label}"


def vat_amount(organization: Organization, total_bill: Decimal) -> Decimal:
    if not organization.is_vat_applied:
        return Decimal("0.00")
    rate = Decimal(str(organization.vat_rate or 0))
    flat = Decimal(str(organization.vat_flat_amount or 0))
    return (total_bill * rate / Decimal("100") + flat).quantize(Decimal("0.01"))


def render_invoice(
    organization: Organization,
    period: Period,
    report: InvoiceReport,
    repeated_coupons: int,
) -> str:
    return environment.get_template("documents/invoice.html").render(
        station_name=settings.station_name,
        station_address=settings.station_address,
        logo=_logo_data_uri(),
        organization=organization,
        period=period,
        report=report,
        repeated_coupons=repeated_coupons,
    )


def render_cover(
    organization: Organization, period: Period, report: InvoiceReport
) -> str:
    vat = vat_amount(organization, report.total_bill)
    return environment.get_template("documents/cover.html").render(
        station_name=settings.station_name,
        station_address=settings.station_address,
        organization=organization,
        period=period,
        report=report,
        vat=vat,
        grand_total=report.total_bill + vat,
    )


def build_invoice_document(
    organization: Organization,
    period: Period,
    report: InvoiceReport,
    repeated_coupons: int,
    include_cover: bool,
) -> Document:
    stem = file_stem(organization, period)
    invoice_html = render_invoice(organization, period, report, repeated_coupons)
    if not include_cover:
        return Document(
            filename=f"{stem}-invoice.html",
            content=invoice_html.encode("utf-8"),
            media_type=HTML_MEDIA_TYPE,
        )

    cover_html = render_cover(organization, period, report)
    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(f"{stem}-invoice.html", invoice_html)
        archive.writestr(f"{stem}-cover.html", cover_html)
    return Document(
        filename=f"{stem}-invoice-with-cover.zip",
        content=buffer.getvalue(),
        media_type=ZIP_MEDIA_TYPE,
    )


def _breakdown_by_fuel(invoice: Invoice) -> dict[str, dict]:
    return {
        entry["fuel_name"]: entry
        for entry in (invoice.fuel_breakdown or [])
        if entry.get("fuel_name")
    }


def build_bill_summary(
    period: Period, rows: list[tuple[Invoice, Organization]]
) -> Document:
    """One spreadsheet row per organization invoiced in the month."""
    fuel_names: list[str] = []
    for invoice, _ in rows:
        for name in _breakdown_by_fuel(invoice):
            if name not in fuel_names:
                fuel_names.append(name)

    wb = Workbook()
    ws = wb.active
    ws.title = f"Bill Summary {period.label}"[:31]

    headers = ["S/No", "Name of the Organization", "Name (local)"]
    headers += [f"{name} Bill" for name in fuel_names] + ["Total Bill"]
    headers += [f"{name} Coupons" for name in fuel_names] + ["Total Coupons"]
    headers += ["Tax %", "Previous Due", "Total Due", "Paid", "Balance", "Check No", "Remarks"]

    ws.append([settings.station_name])
    ws.append([settings.station_address])
    ws.append(["Bill Summary"])
    ws.append([f"The month of {period.label}"])
    ws.append([])
    ws.append(headers)
    header_row = ws.max_row
    for cell in ws[header_row]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
    ws["A1"].font = Font(size=16, bold=True)
    ws["A3"].font = Font(size=18, bold=True)

    for serial, (invoice, organization) in enumerate(rows, start=1):
        breakdown = _breakdown_by_fuel(invoice)
        bills = [
            float(Decimal(str(breakdown.get(name, {}).get("total_price", 0))))
            for name in fuel_names
        ]
        coupons = [int(breakdown.get(name, {}).get("total_coupon", 0)) for name in fuel_names]
        total_bill = float(invoice.total_bill)
        ws.append(
            [serial, organization.name, organization.name_bn or ""]
            + bills
            + [total_bill]
            + coupons
            + [int(invoice.total_coupon)]
            + [float(organization.vat_rate or 0), "", total_bill, "", "", "", ""]
        )

    money_columns = list(range(4, 4 + len(fuel_names) + 1))
    due_column = 3 + 2 * (len(fuel_names) + 1) + 3
    money_columns.append(due_column)
    for col_idx in money_columns:
        col_letter = get_column_letter(col_idx)
        for row_idx in range(header_row + 1, ws.max_row + 1):
            ws[f"{col_letter}{row_idx}"].number_format = "#,##0.00"

    ws.freeze_panes = f"A{header_row + 1}"
    for col_idx in range(1, len(headers) + 1):
        col_letter = get_column_letter(col_idx)
        max_len = max(
            len(str(ws.cell(row=row_idx, column=col_idx).value or ""))
            for row_idx in range(header_row, ws.max_row + 1)
        )
        ws.column_dimensions[col_letter].width = min(45, max(8, max_len + 2))

    bio = BytesIO()
    wb.save(bio)
    return Document(
        filename=f"Bill-Summary-{period.month_name}-{period.year}.xlsx",
        content=bio.getvalue(),
        media_type=XLSX_MEDIA_TYPE,
    )
