import logging
import math
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from ..config import TEMPLATE_DIR, settings
from ..db import get_db
from ..services import documents, order_repository
from ..services import invoices as invoices_service
from ..services.catalog import get_organization, list_organizations
from ..services.errors import InvalidPeriod, NoDataForPeriod
from ..services.periods import MONTH_NAMES, Period, resolve_period

router = APIRouter()
templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
logger = logging.getLogger(__name__)

MONTH_NUMBERS = {name: index for index, name in enumerate(MONTH_NAMES, start=1)}


def _render_list(
    request: Request,
    db: Session,
    q: str | None = None,
    page: int = 1,
    errors: list[str] | None = None,
    form: dict | None = None,
    generated: bool = False,
    status_code: int = 200,
) -> HTMLResponse:
    per_page = settings.invoices_per_page
    rows, total = invoices_service.list_invoices(db, q=q, page=page, per_page=per_page)
    return templates.TemplateResponse(
        request,
        "invoices/list.html",
        {
            "request": request,
            "rows": rows,
            "q": q or "",
            "page": max(page, 1),
            "pages": max(1, math.ceil(total / per_page)),
            "total": total,
            "organizations": list_organizations(db),
            "month_numbers": MONTH_NUMBERS,
            "errors": errors or [],
            "form": form or {"organization_id": "", "month": "", "year": ""},
            "generated": generated,
        },
        status_code=status_code,
    )


def _render_error(request: Request, message: str, status_code: int) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "invoices/error.html",
        {"request": request, "errors": [message]},
        status_code=status_code,
    )


def _parse_int(value: str) -> int | None:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _resolve_period(month, year) -> tuple[Period | None, list[str]]:
    errors: list[str] = []
    if month is None:
        errors.append("Month is required.")
    if year is None:
        errors.append("Year is required.")
    elif not settings.min_invoice_year <= year <= settings.max_invoice_year:
        errors.append(
            f"Year must be between {settings.min_invoice_year} "
            f"and {settings.max_invoice_year}."
        )
    if errors:
        return None, errors
    try:
        return resolve_period(month, year), []
    except InvalidPeriod:
        return None, ["Month must be between 1 and 12."]


def _attachment(document: documents.Document) -> Response:
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={
            "Content-Disposition": (
                f"attachment; filename*=UTF-8''{quote(document.filename)}"
            )
        },
    )


@router.get("/invoices", response_class=HTMLResponse)
def invoices_list(
    request: Request,
    q: str | None = None,
    page: int = Query(1, ge=1),
    generated: int | None = Query(None),
    db: Session = Depends(get_db),
) -> HTMLResponse:
    return _render_list(request, db, q=q, page=page, generated=generated == 1)


@router.get("/invoices/periods")
def invoices_periods(db: Session = Depends(get_db)) -> dict:
    months, years = order_repository.fetch_order_periods(db)
    return {"months": months, "years": years}


@router.post("/invoices/generate", response_class=HTMLResponse)
async def invoices_generate(
    request: Request, db: Session = Depends(get_db)
) -> Response:
    form = await request.form()
    organization_id_raw = str(form.get("organization_id", "")).strip()
    month_raw = str(form.get("month", "")).strip()
    year_raw = str(form.get("year", "")).strip()
    form_values = {
        "organization_id": organization_id_raw,
        "month": month_raw,
        "year": year_raw,
    }

    organization_id = _parse_int(organization_id_raw)
    errors: list[str] = []
    if not organization_id:
        errors.append("Organization is required.")
    elif get_organization(db, organization_id) is None:
        errors.append("Organization not found.")
    period, period_errors = _resolve_period(_parse_int(month_raw), _parse_int(year_raw))
    errors.extend(period_errors)
    if errors:
        return _render_list(request, db, errors=errors, form=form_values, status_code=400)

    try:
        invoice = invoices_service.generate_monthly_invoice(
            db, organization_id, period.anchor
        )
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Invoice generation failed")
        return _render_list(
            request,
            db,
            errors=["Something went wrong generating the invoice."],
            form=form_values,
            status_code=500,
        )

    if invoice is None:
        return _render_list(
            request,
            db,
            errors=[f"Nothing to invoice for {period.label}."],
            form=form_values,
            status_code=404,
        )
    return RedirectResponse(url="/invoices?generated=1", status_code=303)


@router.get("/invoices/summary/export")
def invoices_summary_export(
    request: Request,
    month: int | None = Query(None),
    year: int | None = Query(None),
    db: Session = Depends(get_db),
) -> Response:
    period, errors = _resolve_period(month, year)
    if errors:
        return _render_error(request, " ".join(errors), 400)

    rows = invoices_service.invoices_for_month(db, period.month, period.year)
    try:
        document = documents.build_bill_summary(period, rows)
    except Exception:
        logger.exception("Bill summary export failed")
        return _render_error(request, "Something went wrong exporting the summary.", 500)
    return _attachment(document)


@router.get("/invoices/{organization_id}/export")
def invoices_export(
    organization_id: int,
    request: Request,
    month: int | None = Query(None),
    year: int | None = Query(None),
    include_cover: bool = Query(False),
    db: Session = Depends(get_db),
) -> Response:
    organization = get_organization(db, organization_id)
    if organization is None:
        return _render_error(request, f"Organization {organization_id} not found.", 404)

    period, errors = _resolve_period(month, year)
    if errors:
        return _render_error(request, " ".join(errors), 400)

    try:
        report = invoices_service.build_period_report(db, organization_id, period)
    except NoDataForPeriod:
        return _render_error(
            request, f"Nothing to invoice for {organization.name} in {period.label}.", 404
        )
    repeated = order_repository.count_repeated_coupons(
        db, organization_id, period.start, period.end
    )

    try:
        document = documents.build_invoice_document(
            organization, period, report, repeated, include_cover
        )
    except Exception:
        logger.exception("Invoice document rendering failed")
        return _render_error(request, "Something went wrong rendering the invoice.", 500)
    return _attachment(document)
