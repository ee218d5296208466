"""Location lookup, distance ranking and coordinate enrichment."""

from .distance import (
    calculate_distances_to_companies,
    filter_companies_by_delivery_radius,
    get_companies_within_radius,
)
from .geocoding import GeocodingConfig, build_provider_chain
from .service import LocationService

__all__ = [
    "LocationService",
    "GeocodingConfig",
    "build_provider_chain",
    "calculate_distances_to_companies",
    "filter_companies_by_delivery_radius",
    "get_companies_within_radius",
]
