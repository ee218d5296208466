"""Domain models for companies (tenants) and their locations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

DEFAULT_DELIVERY_RADIUS_MILES = 25.0
DEFAULT_DELIVERY_FEE = 50.0


@dataclass(frozen=True, slots=True)
class Coordinates:
    """Latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class Address:
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    coordinates: Optional[Coordinates] = None


@dataclass(frozen=True, slots=True)
class Company:
    """A rental operator (tenant) on the platform."""

    id: str
    name: str
    subdomain: str
    address: Address = field(default_factory=Address)
    domain: Optional[str] = None
    is_active: bool = True
    delivery_radius: Optional[float] = None
    delivery_fee: float = DEFAULT_DELIVERY_FEE
    email: Optional[str] = None
    phone: Optional[str] = None
    branding: dict = field(default_factory=dict)

    @property
    def coordinates(self) -> Optional[Coordinates]:
        return self.address.coordinates

    @property
    def effective_delivery_radius(self) -> float:
        if self.delivery_radius is None:
            return DEFAULT_DELIVERY_RADIUS_MILES
        return self.delivery_radius


@dataclass(frozen=True, slots=True)
class DistanceResult:
    """Distance from a customer location to one company, computed per query."""

    company: Company
    distance: float
    within_delivery_radius: bool


@dataclass(frozen=True, slots=True)
class DeliveryOption:
    company: Company
    distance: float


class CoordinateUpdateStatus(str, Enum):
    UPDATED = "updated"
    SKIPPED_PRESENT = "skipped_present"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CoordinateUpdateResult:
    """Outcome of a single coordinate enrichment attempt."""

    company_id: str
    status: CoordinateUpdateStatus
    coordinates: Optional[Coordinates] = None
    reason: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status is CoordinateUpdateStatus.UPDATED
