from datetime import date
from decimal import Decimal

from fuel_billing.models import Organization, Vehicle
from fuel_billing.models.base import utcnow
from fuel_billing.services import order_repository
from fuel_billing.services.invoices import build_report
from fuel_billing.services.periods import resolve_period


def _window():
    period = resolve_period(9, 2025)
    return period.start, period.end


def test_fuel_rows_use_latest_price_in_first_seen_order(db_session, fleet, add_order):
    org, petrol, diesel = fleet["organization"], fleet["petrol"], fleet["diesel"]
    v1 = fleet["vehicles"][0]
    add_order(org, v1, diesel, date(2025, 9, 10), "10", "100.00")
    add_order(org, v1, petrol, date(2025, 9, 20), "10", "121.00")
    add_order(org, v1, petrol, date(2025, 9, 5), "10", "118.00")
    add_order(org, v1, diesel, date(2025, 9, 25), "10", "104.50")

    rows = order_repository.fetch_fuel_price_rows(db_session, org.id, *_window())

    assert [(row.fuel_name, row.price) for row in rows] == [
        ("Diesel", Decimal("104.50")),
        ("Petrol", Decimal("121.00")),
    ]


def test_queries_ignore_other_periods_organizations_and_deleted(
    db_session, fleet, add_order
):
    org, petrol = fleet["organization"], fleet["petrol"]
    v1 = fleet["vehicles"][0]
    other = Organization(ucode="ORG-2", name="Other")
    db_session.add(other)
    db_session.flush()
    other_vehicle = Vehicle(organization_id=other.id, ucode="X-1")
    db_session.add(other_vehicle)
    db_session.commit()

    kept = add_order(org, v1, petrol, date(2025, 9, 30), "10", "120.00")
    add_order(org, v1, petrol, date(2025, 8, 31), "10", "120.00")
    add_order(org, v1, petrol, date(2025, 10, 1), "10", "120.00")
    add_order(other, other_vehicle, petrol, date(2025, 9, 15), "10", "120.00")
    deleted = add_order(org, v1, petrol, date(2025, 9, 15), "10", "120.00")
    deleted.deleted_at = utcnow()
    db_session.commit()

    assert order_repository.fetch_order_ids(db_session, org.id, *_window()) == [kept.id]
    aggregates = order_repository.fetch_vehicle_day_aggregates(
        db_session, org.id, *_window()
    )
    assert [(row.ucode, row.day) for row in aggregates] == [("V-1", 30)]


def test_vehicle_day_aggregates_sum_same_day(db_session, fleet, add_order):
    org, petrol, diesel = fleet["organization"], fleet["petrol"], fleet["diesel"]
    v1, v2, _ = fleet["vehicles"]
    add_order(org, v1, petrol, date(2025, 9, 3), "10.25", "120.00")
    add_order(org, v1, petrol, date(2025, 9, 3), "4.75", "120.00")
    add_order(org, v1, petrol, date(2025, 9, 1), "1.00", "120.00")
    add_order(org, v2, diesel, date(2025, 9, 2), "8.00", "100.00")

    aggregates = order_repository.fetch_vehicle_day_aggregates(
        db_session, org.id, *_window()
    )

    assert [(row.fuel_name, row.ucode, row.day) for row in aggregates] == [
        ("Diesel", "V-2", 2),
        ("Petrol", "V-1", 1),
        ("Petrol", "V-1", 3),
    ]
    same_day = aggregates[2]
    assert same_day.total_qty == Decimal("15.00")
    assert same_day.total_price == Decimal("1800.00")
    assert same_day.order_count == 2


def test_repeated_coupons_count_vehicle_days(db_session, fleet, add_order):
    org, petrol, diesel = fleet["organization"], fleet["petrol"], fleet["diesel"]
    v1, v2, _ = fleet["vehicles"]
    add_order(org, v1, petrol, date(2025, 9, 3), "1", "120.00")
    add_order(org, v1, diesel, date(2025, 9, 3), "1", "100.00")
    add_order(org, v1, petrol, date(2025, 9, 3), "1", "120.00")
    add_order(org, v2, petrol, date(2025, 9, 3), "1", "120.00")
    add_order(org, v2, petrol, date(2025, 9, 4), "1", "120.00")
    add_order(org, v2, petrol, date(2025, 9, 4), "1", "120.00")

    assert order_repository.count_repeated_coupons(db_session, org.id, *_window()) == 2


def test_build_report_from_orders(db_session, fleet, add_order):
    org, petrol, diesel = fleet["organization"], fleet["petrol"], fleet["diesel"]
    v1, v2, v3 = fleet["vehicles"]
    add_order(org, v1, petrol, date(2025, 9, 1), "10.00", "120.00")
    add_order(org, v2, petrol, date(2025, 9, 2), "20.00", "120.00")
    add_order(org, v2, diesel, date(2025, 9, 2), "30.00", "100.00")
    add_order(org, v3, diesel, date(2025, 9, 29), "5.00", "100.00", total="0")

    period = resolve_period(9, 2025)
    report = build_report(db_session, org.id, period.start, period.end, period.anchor)

    petrol_row, diesel_row = report.rows
    assert petrol_row.fuel_name == "Petrol"
    assert [vehicle.ucode for vehicle in petrol_row.vehicles] == ["V-1", "V-2"]
    assert [vehicle.ucode for vehicle in diesel_row.vehicles] == ["V-2"]
    assert diesel_row.total_qty == Decimal("35.00")
    assert report.total_coupon == 4
    assert report.total_qty == Decimal("65.00")
    assert report.total_bill == Decimal("30.00") * Decimal("120.00") + Decimal(
        "35.00"
    ) * Decimal("100.00")
    assert report.page_count == 1


def test_order_periods_lists_months_and_years(db_session, fleet, add_order):
    org, petrol = fleet["organization"], fleet["petrol"]
    v1 = fleet["vehicles"][0]
    add_order(org, v1, petrol, date(2025, 9, 1), "1", "120.00")
    add_order(org, v1, petrol, date(2026, 1, 1), "1", "120.00")
    add_order(org, v1, petrol, date(2026, 9, 1), "1", "120.00")

    months, years = order_repository.fetch_order_periods(db_session)

    assert months == [1, 9]
    assert years == [2025, 2026]


def test_daily_prices_keep_latest_order_per_day(db_session, fleet, add_order):
    org, petrol, diesel = fleet["organization"], fleet["petrol"], fleet["diesel"]
    v1, v2, _ = fleet["vehicles"]
    add_order(org, v1, petrol, date(2025, 9, 3), "10", "121.00")
    add_order(org, v2, petrol, date(2025, 9, 3), "10", "122.00")
    add_order(org, v1, petrol, date(2025, 9, 8), "10", "110.00")
    add_order(org, v1, diesel, date(2025, 9, 9), "10", "0")

    prices = order_repository.fetch_daily_prices(db_session, org.id, *_window())

    assert prices == {"Petrol": {3: Decimal("122.00"), 8: Decimal("110.00")}}
