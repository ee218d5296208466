"""HTTP geocoding providers (Google Maps, Nominatim, Zippopotam)."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ...config import Settings
from ...models.domain import Coordinates

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
CONNECT_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True, slots=True)
class GeocodingConfig:
    """Provider credentials and toggles, fixed when the location service is built."""

    google_maps_api_key: Optional[str] = None
    zippopotam_enabled: bool = True
    cascade_on_failure: bool = False
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    batch_delay_seconds: float = 1.0
    google_geocode_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    nominatim_user_agent: str = "bouncehousekids-api/1.0"
    zippopotam_url: str = "http://api.zippopotam.us/us"

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeocodingConfig":
        return cls(
            google_maps_api_key=settings.google_maps_api_key,
            zippopotam_enabled=settings.zippopotam_enabled,
            cascade_on_failure=settings.geocode_cascade_on_failure,
            timeout_seconds=settings.geocode_timeout_seconds,
            batch_delay_seconds=settings.coordinate_batch_delay_seconds,
            google_geocode_url=settings.google_geocode_url,
            nominatim_url=settings.nominatim_url,
            nominatim_user_agent=settings.nominatim_user_agent,
            zippopotam_url=settings.zippopotam_url,
        )


class _HttpProvider:
    """Shared GET-and-parse plumbing; every failure is logged and becomes None."""

    name = "http"

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, CONNECT_TIMEOUT_SECONDS)),
            transport=self.transport,
        )

    def _get_json(self, url: str, params: dict | None = None, headers: dict | None = None) -> Any:
        client = self._get_client()
        try:
            response = client.get(url, params=params, headers=headers)
            response.raise_for_status()
            return response.json()
        finally:
            client.close()

    def _request(self, url: str, params: dict | None = None, headers: dict | None = None) -> Any:
        try:
            return self._get_json(url, params=params, headers=headers)
        except httpx.HTTPStatusError as e:
            logger.warning(f"{self.name} request failed with HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.warning(f"{self.name} request failed: {e!r}")
        except ValueError as e:
            logger.warning(f"{self.name} returned an unreadable response: {e}")
        return None


class GeocodingProvider(_HttpProvider, ABC):
    """Resolves a free-text address to coordinates, or None."""

    @abstractmethod
    def geocode(self, query: str) -> Optional[Coordinates]:
        raise NotImplementedError


class GoogleGeocodingProvider(GeocodingProvider):
    name = "google"

    def __init__(self, api_key: str, base_url: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key
        self.base_url = base_url

    def geocode(self, query: str) -> Optional[Coordinates]:
        data = self._request(self.base_url, params={"address": query, "key": self.api_key})
        if not isinstance(data, dict):
            return None
        results = data.get("results") or []
        if not results:
            if data.get("status") not in (None, "OK", "ZERO_RESULTS"):
                logger.warning(f"Google geocoding returned status {data.get('status')} for '{query}'")
            return None
        try:
            location = results[0]["geometry"]["location"]
            return Coordinates(latitude=float(location["lat"]), longitude=float(location["lng"]))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning(f"Malformed Google geocoding result for '{query}': {e!r}")
            return None


class NominatimGeocodingProvider(GeocodingProvider):
    name = "nominatim"

    def __init__(self, base_url: str, user_agent: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url
        self.user_agent = user_agent

    def geocode(self, query: str) -> Optional[Coordinates]:
        data = self._request(
            self.base_url,
            params={"format": "json", "q": query, "limit": 1},
            headers={"User-Agent": self.user_agent},
        )
        if not isinstance(data, list) or not data:
            return None
        try:
            match = data[0]
            return Coordinates(latitude=float(match["lat"]), longitude=float(match["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Malformed Nominatim result for '{query}': {e!r}")
            return None


class ZippopotamProvider(_HttpProvider):
    """Free US zip code lookup (api.zippopotam.us)."""

    name = "zippopotam"

    def __init__(self, base_url: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip("/")

    def lookup(self, zip_code: str) -> Optional[Coordinates]:
        """First place for a postal code, or None when the payload has no places.

        Transport and HTTP errors (including 404 for unknown codes) are raised.
        """
        data = self._get_json(f"{self.base_url}/{zip_code}")
        if not isinstance(data, dict):
            return None
        places = data.get("places") or []
        if not places:
            return None
        try:
            place = places[0]
            return Coordinates(latitude=float(place["latitude"]), longitude=float(place["longitude"]))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Malformed Zippopotam result for '{zip_code}': {e!r}")
            return None


def build_provider_chain(
    config: GeocodingConfig, transport: httpx.BaseTransport | None = None
) -> list[GeocodingProvider]:
    """Ordered geocoders: Google first when a key is configured, then Nominatim."""

    chain: list[GeocodingProvider] = []
    if config.google_maps_api_key:
        chain.append(
            GoogleGeocodingProvider(
                api_key=config.google_maps_api_key,
                base_url=config.google_geocode_url,
                timeout=config.timeout_seconds,
                transport=transport,
            )
        )
    chain.append(
        NominatimGeocodingProvider(
            base_url=config.nominatim_url,
            user_agent=config.nominatim_user_agent,
            timeout=config.timeout_seconds,
            transport=transport,
        )
    )
    return chain


def build_zip_provider(
    config: GeocodingConfig, transport: httpx.BaseTransport | None = None
) -> Optional[ZippopotamProvider]:
    if not config.zippopotam_enabled:
        return None
    return ZippopotamProvider(base_url=config.zippopotam_url, timeout=config.timeout_seconds, transport=transport)
