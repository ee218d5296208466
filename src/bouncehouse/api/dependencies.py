"""FastAPI dependencies shared by the route modules."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request

from ..config import settings
from ..data.companies_repository import CompanyRepository, get_company_repository
from ..models.domain import Company
from ..services import tenancy
from ..services.location import GeocodingConfig, LocationService


def get_repository() -> CompanyRepository:
    return get_company_repository()


def get_location_service(repository: CompanyRepository = Depends(get_repository)) -> LocationService:
    return LocationService(GeocodingConfig.from_settings(settings), repository)


def resolve_request_company(
    request: Request, repository: CompanyRepository = Depends(get_repository)
) -> Optional[Company]:
    """Resolve the company from the Host header and attach it to `request.state.company`.

    Hosts without tenant context resolve to None; unknown tenants raise 404.
    """
    resolution = tenancy.resolve_tenant(
        request.headers.get("host"),
        repository,
        platform_domain=settings.platform_domain,
        reserved_subdomains=settings.reserved_subdomains,
    )
    request.state.company = resolution.company
    return resolution.company


def require_company(company: Optional[Company] = Depends(resolve_request_company)) -> Company:
    return tenancy.require_company(company)
