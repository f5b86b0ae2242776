from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import Vehicle
from ..schemas import VehicleCreate, VehicleRead, VehicleUpdate
from ..services import catalog
from ..services.errors import InvalidInput

router = APIRouter()


@router.post("/", response_model=VehicleRead, status_code=201)
def create_vehicle(payload: VehicleCreate, db: Session = Depends(get_db)) -> VehicleRead:
    try:
        return catalog.create_vehicle(db, payload)
    except InvalidInput as exc:
        raise HTTPException(status_code=422, detail=exc.errors)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Vehicle code already exists")


@router.get("/", response_model=list[VehicleRead])
def list_vehicles(
    organization_id: int | None = None, db: Session = Depends(get_db)
) -> list[VehicleRead]:
    return catalog.list_vehicles(db, organization_id)


@router.get("/{vehicle_id}", response_model=VehicleRead)
def get_vehicle(vehicle_id: int, db: Session = Depends(get_db)) -> VehicleRead:
    vehicle = db.get(Vehicle, vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return vehicle


@router.patch("/{vehicle_id}", response_model=VehicleRead)
def update_vehicle(
    vehicle_id: int, payload: VehicleUpdate, db: Session = Depends(get_db)
) -> VehicleRead:
    vehicle = db.get(Vehicle, vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    try:
        return catalog.update_vehicle(db, vehicle, payload)
    except InvalidInput as exc:
        raise HTTPException(status_code=422, detail=exc.errors)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Vehicle code already exists")
