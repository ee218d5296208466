"""Customer-facing delivery lookup endpoints."""

from __future__ import annotations

import logging
import math
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...exceptions import LocationNotFoundError, LocationQueryError
from ...models.domain import Coordinates
from ...schemas.companies import DeliveryCompanyModel
from ...services.geospatial import normalize_zip_code
from ...services.location import LocationService
from ...services.outputs.formatter import delivery_option_to_dict
from ..dependencies import get_location_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/delivery", tags=["delivery"])

MISSING_LOCATION_MESSAGE = "Please provide zipCode, coordinates (latitude/longitude), or city/state"


def resolve_customer_coordinates(
    service: LocationService,
    zip_code: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
) -> Coordinates:
    """Customer location from the query: zip code, then coordinates, then city/state."""

    zip_code = normalize_zip_code(zip_code) if zip_code else None
    has_coordinates = latitude is not None or longitude is not None
    city = (city or "").strip()
    state = (state or "").strip()

    if not zip_code and not has_coordinates and not (city or state):
        raise LocationQueryError(MISSING_LOCATION_MESSAGE)

    if zip_code:
        coordinates = service.get_zip_code_coordinates(zip_code)
    elif has_coordinates:
        if latitude is None or longitude is None:
            raise LocationQueryError("Both latitude and longitude are required")
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            raise LocationQueryError("Coordinates must be finite numbers")
        if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
            raise LocationQueryError("Coordinates are out of range")
        coordinates = Coordinates(latitude=latitude, longitude=longitude)
    else:
        coordinates = service.geocode_address(", ".join(part for part in (city, state) if part))

    if coordinates is None:
        raise LocationNotFoundError()
    return coordinates


@router.get("/companies", response_model=List[DeliveryCompanyModel], status_code=status.HTTP_200_OK)
def find_delivery_companies(
    zip_code: Optional[str] = Query(default=None, alias="zipCode", description="US zip code"),
    latitude: Optional[float] = Query(default=None, description="Customer latitude"),
    longitude: Optional[float] = Query(default=None, description="Customer longitude"),
    city: Optional[str] = Query(default=None),
    state: Optional[str] = Query(default=None),
    service: LocationService = Depends(get_location_service),
) -> List[DeliveryCompanyModel]:
    """Active companies that deliver to the given location, nearest first."""
    customer = resolve_customer_coordinates(service, zip_code, latitude, longitude, city, state)
    options = service.find_delivery_options(customer)
    logger.info(
        f"Delivery lookup at ({customer.latitude:.4f}, {customer.longitude:.4f}) matched {len(options)} companies"
    )
    return [DeliveryCompanyModel(**delivery_option_to_dict(option)) for option in options]
