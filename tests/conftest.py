from datetime import date
from decimal import Decimal
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from fuel_billing.db import get_db
from fuel_billing.main import app
from fuel_billing.models import Base, Fuel, Order, Organization, Vehicle


@pytest.fixture()
def engine(tmp_path):
    db_path = tmp_path / "test.db"
    engine = create_engine(
        f"sqlite+pysqlite:///{db_path}", connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture()
def SessionLocal(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(SessionLocal):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(SessionLocal):
    def override_get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def fleet(db_session):
    """One organization with three vehicles and two fuels."""
    organization = Organization(
        ucode="ORG-1",
        name="Army Supply Depot",
        is_vat_applied=True,
        vat_rate=Decimal("5.00"),
        vat_flat_amount=Decimal("0"),
    )
    petrol = Fuel(name="Petrol", price=Decimal("120.00"))
    diesel = Fuel(name="Diesel", price=Decimal("100.00"))
    db_session.add_all([organization, petrol, diesel])
    db_session.flush()

    vehicles = [
        Vehicle(organization_id=organization.id, ucode=f"V-{n}", name=f"Truck {n}")
        for n in range(1, 4)
    ]
    db_session.add_all(vehicles)
    db_session.commit()
    return {
        "organization": organization,
        "petrol": petrol,
        "diesel": diesel,
        "vehicles": vehicles,
    }


@pytest.fixture()
def add_order(db_session):
    numbers = count(1)

    def _add(
        organization,
        vehicle,
        fuel,
        sold_date: date,
        qty: str,
        price: str,
        total: str | None = None,
    ) -> Order:
        fuel_qty = Decimal(qty)
        per_ltr_price = Decimal(price)
        order = Order(
            order_no=str(1000 + next(numbers)),
            organization_id=organization.id,
            vehicle_id=vehicle.id,
            fuel_id=fuel.id,
            fuel_qty=fuel_qty,
            per_ltr_price=per_ltr_price,
            total_price=Decimal(total) if total is not None else fuel_qty * per_ltr_price,
            sold_date=sold_date,
        )
        db_session.add(order)
        db_session.commit()
        return order

    return _add
