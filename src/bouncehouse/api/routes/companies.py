"""Tenant-scoped company endpoints and coordinate maintenance."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ...data.companies_repository import CompanyRepository
from ...models.domain import Company
from ...schemas.companies import (
    CompanyBrandingResponse,
    CompanyPublicModel,
    CoordinateRefreshResponse,
    CoordinateUpdateModel,
    CurrentCompanyResponse,
)
from ...services.location import LocationService
from ...services.location.distance import has_coordinates
from ...services.outputs.formatter import (
    company_branding_to_dict,
    company_to_public_dict,
    coordinate_update_to_dict,
)
from ..dependencies import get_location_service, get_repository, require_company, resolve_request_company

router = APIRouter(prefix="/companies", tags=["companies"])


@router.get("/branding", response_model=CompanyBrandingResponse, status_code=status.HTTP_200_OK)
def get_company_branding(company: Company = Depends(require_company)) -> CompanyBrandingResponse:
    return CompanyBrandingResponse(**company_branding_to_dict(company))


@router.get("/current", response_model=CurrentCompanyResponse, status_code=status.HTTP_200_OK)
def get_current_company(company: Optional[Company] = Depends(resolve_request_company)) -> CurrentCompanyResponse:
    if company is None:
        return CurrentCompanyResponse(company=None)
    return CurrentCompanyResponse(company=CompanyPublicModel(**company_to_public_dict(company)))


@router.post("/coordinates/refresh", response_model=CoordinateRefreshResponse, status_code=status.HTTP_200_OK)
def refresh_company_coordinates(
    delay_seconds: Optional[float] = Query(default=None, ge=0.0, le=60.0, description="Pause between geocoding calls"),
    repository: CompanyRepository = Depends(get_repository),
    service: LocationService = Depends(get_location_service),
) -> CoordinateRefreshResponse:
    """Geocode active companies that have no coordinates yet, one at a time."""
    pending = [company for company in repository.list_active() if not has_coordinates(company)]
    results = service.batch_update_company_coordinates(pending, delay_seconds=delay_seconds)
    return CoordinateRefreshResponse(
        total=len(results),
        updated=sum(1 for result in results if result.succeeded),
        results=[CoordinateUpdateModel(**coordinate_update_to_dict(result)) for result in results],
    )
