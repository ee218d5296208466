"""Company and delivery lookup API schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class CoordinatesModel(BaseModel):
    latitude: float
    longitude: float


class AddressModel(BaseModel):
    street: str
    city: str
    state: str
    zipCode: str
    coordinates: Optional[CoordinatesModel] = None


class CompanyPublicModel(BaseModel):
    id: str
    name: str
    subdomain: str
    address: AddressModel
    deliveryRadius: float
    deliveryFee: float


class DeliveryCompanyModel(BaseModel):
    id: str
    name: str
    address: AddressModel
    deliveryRadius: float
    deliveryFee: float
    distance: Optional[float] = None


class ContactModel(BaseModel):
    email: Optional[str] = None
    phone: Optional[str] = None
    address: AddressModel


class CompanyBrandingResponse(BaseModel):
    name: str
    branding: dict
    contact: ContactModel
    deliveryRadius: float
    deliveryFee: float


class CurrentCompanyResponse(BaseModel):
    company: Optional[CompanyPublicModel] = None


class CoordinateUpdateModel(BaseModel):
    companyId: str
    status: str
    coordinates: Optional[CoordinatesModel] = None
    reason: Optional[str] = None


class CoordinateRefreshResponse(BaseModel):
    total: int
    updated: int
    results: List[CoordinateUpdateModel]
