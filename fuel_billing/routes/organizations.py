from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import OrganizationCreate, OrganizationRead, OrganizationUpdate
from ..services import catalog
from ..services.errors import InvalidInput

router = APIRouter()


def _get_or_404(db: Session, organization_id: int):
    organization = catalog.get_organization(db, organization_id)
    if organization is None:
        raise HTTPException(status_code=404, detail="Organization not found")
    return organization


@router.post("/", response_model=OrganizationRead, status_code=201)
def create_organization(
    payload: OrganizationCreate, db: Session = Depends(get_db)
) -> OrganizationRead:
    try:
        return catalog.create_organization(db, payload)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Organization code already exists")


@router.get("/", response_model=list[OrganizationRead])
def list_organizations(db: Session = Depends(get_db)) -> list[OrganizationRead]:
    return catalog.list_organizations(db)


@router.get("/{organization_id}", response_model=OrganizationRead)
def get_organization(
    organization_id: int, db: Session = Depends(get_db)
) -> OrganizationRead:
    return _get_or_404(db, organization_id)


@router.patch("/{organization_id}", response_model=OrganizationRead)
def update_organization(
    organization_id: int, payload: OrganizationUpdate, db: Session = Depends(get_db)
) -> OrganizationRead:
    organization = _get_or_404(db, organization_id)
    try:
        return catalog.update_organization(db, organization, payload)
    except InvalidInput as exc:
        raise HTTPException(status_code=422, detail=exc.errors)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Organization code already exists")


@router.delete("/{organization_id}", status_code=204)
def delete_organization(organization_id: int, db: Session = Depends(get_db)) -> None:
    catalog.delete_organization(db, _get_or_404(db, organization_id))
