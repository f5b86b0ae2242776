from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class OrganizationCreate(BaseModel):
    ucode: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=255)
    name_bn: str | None = None
    is_vat_applied: bool = True
    vat_rate: Decimal = Decimal("0")
    vat_flat_amount: Decimal = Decimal("0")


class OrganizationUpdate(BaseModel):
    ucode: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    name_bn: str | None = None
    is_vat_applied: bool | None = None
    vat_rate: Decimal | None = None
    vat_flat_amount: Decimal | None = None


class OrganizationRead(BaseModel):
    id: int
    ucode: str
    name: str
    name_bn: str | None
    is_vat_applied: bool
    vat_rate: Decimal
    vat_flat_amount: Decimal
    created_at: datetime

    model_config = {"from_attributes": True}


class FuelCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    price: Decimal = Field(ge=0)


class FuelUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    price: Decimal | None = Field(default=None, ge=0)


class FuelRead(BaseModel):
    id: int
    name: str
    price: Decimal

    model_config = {"from_attributes": True}


class VehicleCreate(BaseModel):
    organization_id: int
    ucode: str = Field(min_length=1, max_length=50)
    fuel_id: int | None = None
    name: str | None = None
    model: str | None = None
    type: str | None = None


class VehicleUpdate(BaseModel):
    organization_id: int | None = None
    ucode: str | None = Field(default=None, min_length=1, max_length=50)
    fuel_id: int | None = None
    name: str | None = None
    model: str | None = None
    type: str | None = None


class VehicleRead(BaseModel):
    id: int
    organization_id: int
    ucode: str
    fuel_id: int | None
    name: str | None
    model: str | None
    type: str | None

    model_config = {"from_attributes": True}
