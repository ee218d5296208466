"""Geocoding, delivery lookup and coordinate enrichment for companies."""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, Optional, Sequence

import httpx

from ...data.companies_repository import CompanyRepository
from ...models.domain import (
    Company,
    Coordinates,
    CoordinateUpdateResult,
    CoordinateUpdateStatus,
    DeliveryOption,
)
from ..geospatial import format_address
from .distance import filter_companies_by_delivery_radius, has_coordinates
from .geocoding import (
    GeocodingConfig,
    GeocodingProvider,
    ZippopotamProvider,
    build_provider_chain,
    build_zip_provider,
)

logger = logging.getLogger(__name__)


class LocationService:
    """Resolves customer locations and keeps company coordinates populated.

    Provider credentials and toggles come from the `GeocodingConfig` passed in;
    nothing is read from the process environment after construction.
    """

    def __init__(
        self,
        config: GeocodingConfig,
        repository: CompanyRepository | None = None,
        *,
        providers: Sequence[GeocodingProvider] | None = None,
        zip_provider: ZippopotamProvider | None = None,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.repository = repository
        self.providers = list(providers) if providers is not None else build_provider_chain(config, transport)
        if not config.zippopotam_enabled:
            zip_provider = None
        elif zip_provider is None:
            zip_provider = build_zip_provider(config, transport)
        self.zip_provider = zip_provider
        self._sleep = sleep

    def geocode_address(self, address: str) -> Optional[Coordinates]:
        """Coordinates for a free-text address, or None. Never raises."""

        query = (address or "").strip()
        if not query or not self.providers:
            return None

        # Without cascading only the first (preferred) provider is consulted.
        candidates = self.providers if self.config.cascade_on_failure else self.providers[:1]
        for provider in candidates:
            try:
                coordinates = provider.geocode(query)
            except Exception:
                logger.exception(f"Geocoding with {provider.name} failed for '{query}'")
                coordinates = None
            if coordinates is not None:
                return coordinates
        return None

    def get_zip_code_coordinates(self, zip_code: str) -> Optional[Coordinates]:
        """Coordinates for a postal code: zip lookup service first, then the geocoder."""

        try:
            if self.zip_provider is not None:
                coordinates = self.zip_provider.lookup(zip_code)
                if coordinates is not None:
                    return coordinates
            return self.geocode_address(zip_code)
        except Exception:
            logger.exception(f"Zip code geocoding failed for '{zip_code}'")
            return None

    def find_delivery_options(
        self, customer: Coordinates, companies: Iterable[Company] | None = None
    ) -> list[DeliveryOption]:
        if companies is None:
            if self.repository is None:
                raise ValueError("A company repository is required to list companies.")
            companies = self.repository.list_active()
        return filter_companies_by_delivery_radius(customer, companies)

    def update_company_coordinates(self, company: Company) -> CoordinateUpdateResult:
        """Geocode and persist a company's address if it has no coordinates yet.

        Failures are logged and reported in the returned result, never raised.
        """

        if has_coordinates(company):
            return CoordinateUpdateResult(
                company_id=company.id,
                status=CoordinateUpdateStatus.SKIPPED_PRESENT,
                coordinates=company.coordinates,
            )

        if self.repository is None:
            logger.error(f"Cannot store coordinates for company {company.name}: no repository configured")
            return CoordinateUpdateResult(
                company_id=company.id,
                status=CoordinateUpdateStatus.FAILED,
                reason="No company repository configured",
            )

        address = company.address
        full_address = format_address(address.street, address.city, address.state, address.zip_code)
        try:
            coordinates = self.geocode_address(full_address)
            if coordinates is None:
                logger.info(f"No coordinates found for company {company.name} ('{full_address}')")
                return CoordinateUpdateResult(
                    company_id=company.id,
                    status=CoordinateUpdateStatus.NOT_FOUND,
                    reason=f"No geocoding match for '{full_address}'",
                )
            self.repository.save_coordinates(company.id, coordinates)
        except Exception as e:
            logger.error(f"Failed to update coordinates for company {company.name}: {e}")
            return CoordinateUpdateResult(
                company_id=company.id,
                status=CoordinateUpdateStatus.FAILED,
                reason=str(e) or type(e).__name__,
            )

        logger.info(f"Updated coordinates for company: {company.name}")
        return CoordinateUpdateResult(
            company_id=company.id,
            status=CoordinateUpdateStatus.UPDATED,
            coordinates=coordinates,
        )

    def batch_update_company_coordinates(
        self, companies: Sequence[Company], delay_seconds: float | None = None
    ) -> list[CoordinateUpdateResult]:
        """Enrich companies one at a time, pausing between them for provider rate limits."""

        delay = self.config.batch_delay_seconds if delay_seconds is None else delay_seconds
        logger.info(f"Updating coordinates for {len(companies)} companies...")

        results: list[CoordinateUpdateResult] = []
        for company in companies:
            results.append(self.update_company_coordinates(company))
            if delay > 0:
                self._sleep(delay)

        updated = sum(1 for result in results if result.succeeded)
        logger.info(f"Batch coordinate update completed ({updated}/{len(results)} updated)")
        return results

