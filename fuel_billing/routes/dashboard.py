from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import DashboardOverview, VehicleDashboard
from ..services import dashboard

router = APIRouter()


@router.get("/", response_model=DashboardOverview)
def show_dashboard(db: Session = Depends(get_db)) -> DashboardOverview:
    return dashboard.overview(db)


@router.get("/vehicles", response_model=VehicleDashboard)
def show_vehicle_dashboard(db: Session = Depends(get_db)) -> VehicleDashboard:
    return dashboard.vehicle_overview(db)
