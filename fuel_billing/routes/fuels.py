from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import Fuel
from ..schemas import FuelCreate, FuelRead, FuelUpdate
from ..services import catalog
from ..services.errors import InvalidInput

router = APIRouter()


@router.post("/", response_model=FuelRead, status_code=201)
def create_fuel(payload: FuelCreate, db: Session = Depends(get_db)) -> FuelRead:
    try:
        return catalog.create_fuel(db, payload)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Fuel already exists")


@router.get("/", response_model=list[FuelRead])
def list_fuels(db: Session = Depends(get_db)) -> list[FuelRead]:
    return catalog.list_fuels(db)


@router.patch("/{fuel_id}", response_model=FuelRead)
def update_fuel(
    fuel_id: int, payload: FuelUpdate, db: Session = Depends(get_db)
) -> FuelRead:
    fuel = db.get(Fuel, fuel_id)
    if fuel is None:
        raise HTTPException(status_code=404, detail="Fuel not found")
    try:
        return catalog.update_fuel(db, fuel, payload)
    except InvalidInput as exc:
        raise HTTPException(status_code=422, detail=exc.errors)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Fuel already exists")
