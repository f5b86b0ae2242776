from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import Fuel, Organization, Vehicle
from ..models.base import utcnow
from ..schemas import (
    FuelCreate,
    FuelUpdate,
    OrganizationCreate,
    OrganizationUpdate,
    VehicleCreate,
    VehicleUpdate,
)
from .errors import InvalidInput


def payload_changes(payload, nullable: tuple[str, ...] = ()) -> dict:
    """Fields the client sent, refusing explicit nulls outside ``nullable``."""
    changes = payload.model_dump(exclude_unset=True)
    errors = [
        f"{key} cannot be null."
        for key, value in changes.items()
        if value is None and key not in nullable
    ]
    if errors:
        raise InvalidInput(errors)
    return changes


def _apply(record, changes: dict) -> None:
    for key, value in changes.items():
        setattr(record, key, value)


def create_organization(db: Session, payload: OrganizationCreate) -> Organization:
    organization = Organization(**payload.model_dump())
    db.add(organization)
    db.commit()
    db.refresh(organization)
    return organization


def list_organizations(db: Session) -> list[Organization]:
    return list(
        db.scalars(
            select(Organization)
            .where(Organization.deleted_at.is_(None))
            .order_by(Organization.ucode)
        )
    )


def get_organization(db: Session, organization_id: int) -> Organization | None:
    organization = db.get(Organization, organization_id)
    if organization is None or organization.is_deleted:
        return None
    return organization


def update_organization(
    db: Session, organization: Organization, payload: OrganizationUpdate
) -> Organization:
    _apply(organization, payload_changes(payload, nullable=("name_bn",)))
    db.commit()
    db.refresh(organization)
    return organization


def delete_organization(db: Session, organization: Organization) -> None:
    organization.deleted_at = utcnow()
    db.commit()


def create_fuel(db: Session, payload: FuelCreate) -> Fuel:
    fuel = Fuel(**payload.model_dump())
    db.add(fuel)
    db.commit()
    db.refresh(fuel)
    return fuel


def list_fuels(db: Session) -> list[Fuel]:
    return list(db.scalars(select(Fuel).order_by(Fuel.name)))


def update_fuel(db: Session, fuel: Fuel, payload: FuelUpdate) -> Fuel:
    _apply(fuel, payload_changes(payload))
    db.commit()
    db.refresh(fuel)
    return fuel


def _check_vehicle_refs(db: Session, organization_id: int | None, fuel_id: int | None) -> None:
    errors: list[str] = []
    if organization_id is not None and get_organization(db, organization_id) is None:
        errors.append(f"Organization {organization_id} does not exist.")
    if fuel_id is not None and db.get(Fuel, fuel_id) is None:
        errors.append(f"Fuel {fuel_id} does not exist.")
    if errors:
        raise InvalidInput(errors)


def create_vehicle(db: Session, payload: VehicleCreate) -> Vehicle:
    _check_vehicle_refs(db, payload.organization_id, payload.fuel_id)
    vehicle = Vehicle(**payload.model_dump())
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)
    return vehicle


def list_vehicles(db: Session, organization_id: int | None = None) -> list[Vehicle]:
    query = select(Vehicle).order_by(Vehicle.ucode)
    if organization_id is not None:
        query = query.where(Vehicle.organization_id == organization_id)
    return list(db.scalars(query))


def update_vehicle(db: Session, vehicle: Vehicle, payload: VehicleUpdate) -> Vehicle:
    changes = payload_changes(payload, nullable=("fuel_id", "name", "model", "type"))
    _check_vehicle_refs(db, changes.get("organization_id"), changes.get("fuel_id"))
    _apply(vehicle, changes)
    db.commit()
    db.refresh(vehicle)
    return vehicle
